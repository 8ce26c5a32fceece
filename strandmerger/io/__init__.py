"""
I/O module for StrandMerger.

Loads assembly FASTA files into contig pools, parses block tables, and
writes merged paired contigs and their placements.
"""

from .io_core_module import (
    BLOCK_COLUMNS,
    PLACEMENT_COLUMNS,
    BlockFormatError,
    open_file,
    read_contigs,
    load_contig_pool,
    read_blocks,
    pctg_header,
    write_paired_contigs,
    write_placements,
    read_placements,
)

__all__ = [
    "BLOCK_COLUMNS",
    "PLACEMENT_COLUMNS",
    "BlockFormatError",
    "open_file",
    "read_contigs",
    "load_contig_pool",
    "read_blocks",
    "pctg_header",
    "write_paired_contigs",
    "write_placements",
    "read_placements",
]
