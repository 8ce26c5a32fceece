#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Tunable limits and acceptance thresholds of the paired
contig builder.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict

logger = logging.getLogger(__name__)


DEFAULT_MAX_GAPS = 300
DEFAULT_MAX_SEARCHED_ALIGNMENT = 400000
MIN_ALIGNMENT = 100
MIN_HOMOLOGY = 85
MIN_ALIGNMENT_QUOTIENT = 0.001


@dataclass(frozen=True)
class MergeSettings:
    """
    Configuration of a PctgBuilder.
    
    Attributes:
        max_alignment: Base comparisons allowed per alignment search
        max_pctg_gap: Largest gap opened on the paired contig side
        max_ctg_gap: Largest gap opened on the contig side
        min_alignment: Minimum alignment length (columns) to accept a merge
        min_homology: Minimum percentage of matching columns
        min_alignment_quotient: Minimum matches/length ratio
    """
    max_alignment: int = DEFAULT_MAX_SEARCHED_ALIGNMENT
    max_pctg_gap: int = DEFAULT_MAX_GAPS
    max_ctg_gap: int = DEFAULT_MAX_GAPS
    min_alignment: int = MIN_ALIGNMENT
    min_homology: float = MIN_HOMOLOGY
    min_alignment_quotient: float = MIN_ALIGNMENT_QUOTIENT

    def __post_init__(self):
        """Validate settings."""
        if self.max_alignment < 1:
            raise ValueError(f"max_alignment must be >= 1, got {self.max_alignment}")
        if self.max_pctg_gap < 0 or self.max_ctg_gap < 0:
            raise ValueError("Gap limits must be >= 0")
        if self.min_alignment < 1:
            raise ValueError(f"min_alignment must be >= 1, got {self.min_alignment}")
        if not 0 <= self.min_homology <= 100:
            raise ValueError(f"min_homology must be a percentage, got {self.min_homology}")
        if not 0 <= self.min_alignment_quotient <= 1:
            raise ValueError(
                f"min_alignment_quotient must be in [0, 1], got {self.min_alignment_quotient}"
            )
        if self.min_alignment > self.max_alignment:
            logger.warning(
                f"min_alignment ({self.min_alignment}) exceeds max_alignment "
                f"({self.max_alignment}); no merge can be accepted"
            )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "MergeSettings":
        """
        Build settings from a configuration dictionary.
        
        Args:
            config: Full configuration (uses its ``merge`` section) or the
                ``merge`` section itself
        
        Returns:
            MergeSettings with unspecified values left at their defaults
        """
        section = config.get('merge', config)
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in section.items() if k in known and v is not None}
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
