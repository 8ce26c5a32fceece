#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Exceptions raised while building paired contigs.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""


class PctgError(Exception):
    """Base class for paired contig construction errors."""
    pass


class ContigNotFoundError(PctgError, KeyError):
    """Raised when a contig identifier is absent from its pool."""

    def __init__(self, ctg_id: int, assembly: str = ""):
        self.ctg_id = ctg_id
        self.assembly = assembly
        label = f"{assembly} contig" if assembly else "contig"
        super().__init__(f"{label} {ctg_id} not found in pool")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidStateError(PctgError):
    """Raised when an operation is applied to a paired contig in the wrong state."""
    pass


class BlockConsistencyError(InvalidStateError):
    """Raised when a block pair does not continue the paired contig it is applied to."""
    pass

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
