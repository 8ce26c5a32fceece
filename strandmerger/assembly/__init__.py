"""
Chain-level assembly for StrandMerger.

This module drives the paired contig builder over chains of blocks:
- Grouping of consecutive blocks into block pairs
- Sequential extension within a chain, parallel processing across chains
- Singleton paired contigs for unmerged master contigs
- Summary statistics
"""

from .pctg_chains import (
    BlockChain,
    ChainMergeResult,
    PctgChainMerger,
    group_block_pairs,
    build_pctg,
    placed_contig_ids,
    add_unmerged_contigs,
    summarize_pctgs,
)

__all__ = [
    "BlockChain",
    "ChainMergeResult",
    "PctgChainMerger",
    "group_block_pairs",
    "build_pctg",
    "placed_contig_ids",
    "add_unmerged_contigs",
    "summarize_pctgs",
]
