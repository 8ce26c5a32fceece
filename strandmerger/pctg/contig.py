#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Immutable assembled sequence owned by a contig pool.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..utils.sequence_utils import reverse_complement


@dataclass(frozen=True)
class Contig:
    """
    Assembled sequence with optional per-base quality.
    
    Attributes:
        ctg_id: Identifier, unique within its assembly
        name: Display name (FASTA record id)
        sequence: Uppercase bases
        quality: Phred scores, one per base (None for FASTA input)
        is_reversed: Whether this object holds the reverse complement
    """
    ctg_id: int
    name: str
    sequence: str
    quality: Optional[Tuple[int, ...]] = None
    is_reversed: bool = False

    def __post_init__(self):
        if self.quality is not None and len(self.quality) != len(self.sequence):
            raise ValueError(
                f"Contig {self.name}: {len(self.quality)} quality values "
                f"for {len(self.sequence)} bases"
            )

    def __len__(self) -> int:
        return len(self.sequence)

    @property
    def length(self) -> int:
        return len(self.sequence)

    def reverse_complement(self) -> "Contig":
        """Return the contig in the opposite orientation."""
        quality = tuple(reversed(self.quality)) if self.quality is not None else None
        return replace(
            self,
            sequence=reverse_complement(self.sequence),
            quality=quality,
            is_reversed=not self.is_reversed,
        )

    def oriented(self, reverse: bool) -> "Contig":
        """Return the forward contig, or its reverse complement when ``reverse``."""
        if reverse == self.is_reversed:
            return self
        return self.reverse_complement()

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
