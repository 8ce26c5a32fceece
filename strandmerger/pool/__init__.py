"""
Contig pools for StrandMerger.
"""

from .contig_pool import ContigPool

__all__ = ["ContigPool"]
