#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Alignment results between a paired contig and a candidate contig.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass
from enum import Flag, auto
from typing import Tuple

from .settings import MergeSettings


class AlignmentFlag(Flag):
    """Conditions that disqualify an alignment from being merged."""
    NONE = 0
    NO_OVERLAP = auto()    # window does not overlap the paired contig
    TOO_SHORT = auto()     # length < min_alignment
    LOW_HOMOLOGY = auto()  # homology < min_homology
    DEGENERATE = auto()    # matches / length < min_alignment_quotient

    def describe(self) -> str:
        if not self:
            return "none"
        return ",".join(f.name.lower() for f in AlignmentFlag if f and f in self)


def evaluate_alignment(matches: int, length: int, settings: MergeSettings) -> AlignmentFlag:
    """
    Check an alignment against the acceptance thresholds.
    
    Boundary values are accepted: an alignment of exactly ``min_alignment``
    columns with exactly ``min_homology`` percent identity qualifies.
    
    Args:
        matches: Matching columns
        length: Block window columns compared or moved off the paired contig
        settings: Thresholds to apply
    
    Returns:
        AlignmentFlag.NONE if acceptable, otherwise the failed conditions
    """
    if length <= 0:
        return AlignmentFlag.NO_OVERLAP
    flags = AlignmentFlag.NONE
    if length < settings.min_alignment:
        flags |= AlignmentFlag.TOO_SHORT
    # integer cross-multiplication keeps the boundary exact
    if matches * 100 < settings.min_homology * length:
        flags |= AlignmentFlag.LOW_HOMOLOGY
    if matches < settings.min_alignment_quotient * length:
        flags |= AlignmentFlag.DEGENERATE
    return flags


@dataclass(frozen=True)
class BestPctgCtgAlignment:
    """
    Best alignment found between a paired contig and a contig.
    
    Positions are half-open ranges of the compared (ungapped) region.
    ``length`` counts the block window columns, including those the shift
    moved off the counterpart placement, which never match. The gaps only
    record the diagonal shift.
    """
    pctg_start: int = 0
    pctg_end: int = 0
    ctg_start: int = 0
    ctg_end: int = 0
    matches: int = 0
    length: int = 0
    pctg_gap: int = 0
    ctg_gap: int = 0
    flags: AlignmentFlag = AlignmentFlag.NO_OVERLAP
    searched: int = 0       # base comparisons spent by the search
    truncated: bool = False  # comparison budget ran out

    @classmethod
    def disqualified(cls, flags: AlignmentFlag = AlignmentFlag.NO_OVERLAP,
                     searched: int = 0, truncated: bool = False) -> "BestPctgCtgAlignment":
        return cls(flags=flags or AlignmentFlag.NO_OVERLAP, searched=searched, truncated=truncated)

    @property
    def is_mergeable(self) -> bool:
        return not self.flags

    @property
    def homology(self) -> float:
        """Percentage of matching columns."""
        if self.length == 0:
            return 0.0
        return 100.0 * self.matches / self.length

    @property
    def homology_fraction(self) -> float:
        if self.length == 0:
            return 0.0
        return self.matches / self.length

    @property
    def quotient(self) -> float:
        return self.homology_fraction

    @property
    def shift(self) -> int:
        """Signed diagonal shift from the block anchor (positive: paired contig gap)."""
        return self.pctg_gap - self.ctg_gap

    @property
    def offset(self) -> int:
        """Paired contig coordinate of contig base 0."""
        return self.pctg_start - self.ctg_start

    @property
    def pos_pair(self) -> Tuple[int, int]:
        return self.pctg_start, self.ctg_start

    @property
    def gap_pair(self) -> Tuple[int, int]:
        return self.pctg_gap, self.ctg_gap

    def __str__(self) -> str:
        return (f"pctg[{self.pctg_start}:{self.pctg_end}] ctg[{self.ctg_start}:{self.ctg_end}] "
                f"len={self.length} homology={self.homology:.2f}% "
                f"gaps={self.pctg_gap}/{self.ctg_gap} flags={self.flags.describe()}")

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
