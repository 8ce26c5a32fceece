"""
StrandMerger v0.1.0

Sequence utility functions for StrandMerger.

Provides the base-level helpers shared by the contig model and the aligner.
"""

from typing import Union

import numpy as np


GAP_BASE = 'N'

_COMPLEMENT = str.maketrans('ACGTNacgtnRYKMSWrykmsw', 'TGCANtgcanYRMKSWyrmksw')


def reverse_complement(sequence: str) -> str:
    """
    Generate reverse complement of DNA sequence.
    
    Args:
        sequence: DNA sequence string
        
    Returns:
        Reverse complement sequence
        
    Example:
        >>> reverse_complement("ATCG")
        'CGAT'
    """
    return sequence.translate(_COMPLEMENT)[::-1]


def to_base_array(sequence: Union[str, bytes]) -> np.ndarray:
    """
    View a sequence as an array of uppercase ASCII codes.
    
    Args:
        sequence: DNA sequence string
        
    Returns:
        uint8 numpy array, one element per base
    """
    if isinstance(sequence, str):
        sequence = sequence.encode('ascii')
    return np.frombuffer(sequence.upper(), dtype=np.uint8)


def count_matches(a: np.ndarray, b: np.ndarray) -> int:
    """
    Count positions where two equally long base arrays agree.
    
    Gap bases never match, not even against another gap base.
    
    Example:
        >>> count_matches(to_base_array("ACGN"), to_base_array("ACTN"))
        2
    """
    if len(a) != len(b):
        raise ValueError(f"Arrays differ in length: {len(a)} != {len(b)}")
    same = a == b
    same &= a != ord(GAP_BASE)
    return int(np.count_nonzero(same))


__all__ = [
    'GAP_BASE',
    'reverse_complement',
    'to_base_array',
    'count_matches',
]
