"""
Paired contig core for StrandMerger.

This module provides the merge engine and its data model:
- Frames and blocks shared by the master and slave assemblies
- Contigs, paired contigs and placement metadata
- Alignment results and merge settings
- PctgBuilder, which creates, extends and merges paired contigs
"""

from .alignment import AlignmentFlag, BestPctgCtgAlignment, evaluate_alignment
from .contig import Contig
from .errors import (
    PctgError,
    ContigNotFoundError,
    InvalidStateError,
    BlockConsistencyError,
)
from .frames import Assembly, Strand, Frame, Block
from .paired_contig import ContigInPctgInfo, PairedContig
from .pctg_builder import PctgBuilder
from .settings import (
    MergeSettings,
    DEFAULT_MAX_GAPS,
    DEFAULT_MAX_SEARCHED_ALIGNMENT,
    MIN_ALIGNMENT,
    MIN_HOMOLOGY,
    MIN_ALIGNMENT_QUOTIENT,
)

__all__ = [
    # Data model
    "Assembly",
    "Strand",
    "Frame",
    "Block",
    "Contig",
    "ContigInPctgInfo",
    "PairedContig",
    "AlignmentFlag",
    "BestPctgCtgAlignment",
    "evaluate_alignment",
    # Engine
    "PctgBuilder",
    "MergeSettings",
    "DEFAULT_MAX_GAPS",
    "DEFAULT_MAX_SEARCHED_ALIGNMENT",
    "MIN_ALIGNMENT",
    "MIN_HOMOLOGY",
    "MIN_ALIGNMENT_QUOTIENT",
    # Errors
    "PctgError",
    "ContigNotFoundError",
    "InvalidStateError",
    "BlockConsistencyError",
]
