"""
Utility modules for StrandMerger.
"""

from .sequence_utils import (
    GAP_BASE,
    reverse_complement,
    to_base_array,
    count_matches,
)

__all__ = [
    "GAP_BASE",
    "reverse_complement",
    "to_base_array",
    "count_matches",
]
