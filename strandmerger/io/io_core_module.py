#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core I/O module for StrandMerger.

Consolidated module containing:
- FASTA contig loading into ContigPools
- Block table (TSV) parsing into BlockChains
- FASTA output of paired contigs
- TSV output of contig placements

The merge engine itself never touches files; everything here turns files
into pools and blocks, and paired contigs back into files.
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import csv
import gzip
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence, TextIO, Tuple, Union

from Bio import SeqIO

from ..assembly.pctg_chains import BlockChain
from ..pctg.frames import Assembly, Block, Frame, Strand
from ..pctg.paired_contig import PairedContig
from ..pool.contig_pool import ContigPool

logger = logging.getLogger(__name__)


BLOCK_COLUMNS = [
    'chain_id',
    'master_ctg', 'master_start', 'master_end', 'master_strand',
    'slave_ctg', 'slave_start', 'slave_end', 'slave_strand',
]

PLACEMENT_COLUMNS = [
    'pctg', 'assembly', 'contig', 'start', 'end', 'strand', 'left_gap', 'right_gap',
]


class BlockFormatError(ValueError):
    """Raised when a block table cannot be parsed."""
    pass


# =============================================================================
# SECTION 2: FILE HANDLING
# =============================================================================

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed.

    Args:
        filepath: Path to file

    Returns:
        True if file is gzipped
    """
    with open(filepath, 'rb') as f:
        return f.read(2) == b'\x1f\x8b'


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.

    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')

    Returns:
        File handle
    """
    filepath = Path(filepath)

    if 'r' in mode:
        if is_gzipped(filepath):
            return gzip.open(filepath, 'rt')
        return open(filepath, 'r')

    if filepath.suffix in ('.gz', '.gzip'):
        return gzip.open(filepath, 'wt')
    return open(filepath, 'w')


# =============================================================================
# SECTION 3: CONTIG INPUT
# =============================================================================

def read_contigs(filepath: Union[str, Path], min_length: int = 0) -> Iterator[Tuple[str, str]]:
    """
    Read FASTA file and yield (name, sequence) pairs.

    Args:
        filepath: Path to FASTA file (can be gzipped)
        min_length: Minimum sequence length filter

    Yields:
        (record id, uppercase sequence)
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"FASTA file not found: {filepath}")

    handle = open_file(filepath, 'r')
    try:
        for record in SeqIO.parse(handle, "fasta"):
            sequence = str(record.seq).upper()
            if len(sequence) < min_length:
                continue
            yield record.id, sequence
    finally:
        handle.close()


def load_contig_pool(
    filepath: Union[str, Path],
    assembly: Assembly,
    min_length: int = 0
) -> ContigPool:
    """
    Load an assembly FASTA into a ContigPool.

    Args:
        filepath: Path to FASTA file (can be gzipped)
        assembly: Assembly the contigs belong to
        min_length: Minimum contig length filter

    Returns:
        ContigPool with ids assigned in file order
    """
    pool = ContigPool.from_sequences(read_contigs(filepath, min_length), assembly)
    logger.info(
        f"Loaded {len(pool)} {assembly.value} contigs ({pool.total_length:,} bp) from {filepath}"
    )
    return pool


# =============================================================================
# SECTION 4: BLOCK INPUT
# =============================================================================

def _parse_frame(row: Dict[str, str], prefix: str, pool: ContigPool,
                 assembly: Assembly, line_no: int) -> Frame:
    """Build a frame from the ``<prefix>_*`` columns of a block row."""
    name = row[f'{prefix}_ctg']
    try:
        ctg_id = pool.id_of(name)
        start = int(row[f'{prefix}_start'])
        end = int(row[f'{prefix}_end'])
        frame = Frame(ctg_id, assembly, start, end, Strand.parse(row[f'{prefix}_strand']))
    except (KeyError, ValueError) as e:
        raise BlockFormatError(f"Row {line_no}: invalid {prefix} frame: {e}") from e

    if not frame.within(pool.get(ctg_id).length):
        raise BlockFormatError(
            f"Row {line_no}: {prefix} frame [{start}, {end}] exceeds contig {name}"
        )
    return frame


def read_blocks(
    filepath: Union[str, Path],
    master_pool: ContigPool,
    slave_pool: ContigPool
) -> List[BlockChain]:
    """
    Read a block table and group its rows into chains.

    The table is tab-separated with a header naming ``BLOCK_COLUMNS``.
    Contigs are referenced by name; coordinates are 0-based and inclusive.
    Lines starting with ``#`` are ignored.

    Args:
        filepath: Path to block table (can be gzipped)
        master_pool: Pool resolving master contig names
        slave_pool: Pool resolving slave contig names

    Returns:
        Chains in order of first appearance, blocks in file order

    Raises:
        BlockFormatError: On a missing column or an invalid row
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Block file not found: {filepath}")

    chains: "OrderedDict[str, List[Block]]" = OrderedDict()

    handle = open_file(filepath, 'r')
    try:
        lines = (line for line in handle if line.strip() and not line.startswith('#'))
        reader = csv.DictReader(lines, delimiter='\t')
        missing = [c for c in BLOCK_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise BlockFormatError(f"Block file {filepath} lacks columns: {', '.join(missing)}")

        for line_no, row in enumerate(reader, start=2):
            block = Block(
                _parse_frame(row, 'master', master_pool, Assembly.MASTER, line_no),
                _parse_frame(row, 'slave', slave_pool, Assembly.SLAVE, line_no),
            )
            chains.setdefault(row['chain_id'], []).append(block)
    finally:
        handle.close()

    result = [BlockChain(chain_id=i, blocks=blocks, name=name)
              for i, (name, blocks) in enumerate(chains.items())]
    logger.info(
        f"Read {sum(len(c.blocks) for c in result)} blocks in {len(result)} chains from {filepath}"
    )
    return result


# =============================================================================
# SECTION 5: PAIRED CONTIG OUTPUT
# =============================================================================

def _names(ids: Iterable[int], ref_vector: Sequence[str]) -> str:
    labels = [ref_vector[i] if 0 <= i < len(ref_vector) else str(i) for i in sorted(ids)]
    return ','.join(labels) if labels else '-'


def pctg_header(
    pctg: PairedContig,
    master_names: Sequence[str],
    slave_names: Sequence[str],
    prefix: str = 'pctg'
) -> str:
    """Build the FASTA header line (without '>') of a paired contig."""
    return (f"{prefix}_{pctg.id} length={pctg.total_length} "
            f"master={_names(pctg.master_ctgs, master_names)} "
            f"slave={_names(pctg.slave_ctgs, slave_names)}")


def write_paired_contigs(
    pctgs: Iterable[PairedContig],
    filepath: Union[str, Path],
    master_names: Sequence[str],
    slave_names: Sequence[str],
    prefix: str = 'pctg',
    line_width: int = 80
) -> int:
    """
    Write paired contigs to a FASTA file.

    Args:
        pctgs: Paired contigs to write
        filepath: Output FASTA file path (``.gz`` compresses)
        master_names: id -> name table of master contigs
        slave_names: id -> name table of slave contigs
        prefix: Record name prefix
        line_width: Number of bases per line (0 = no wrapping)

    Returns:
        Number of sequences written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    handle = open_file(filepath, 'w')
    try:
        for pctg in pctgs:
            if pctg.is_empty():
                continue
            handle.write(f">{pctg_header(pctg, master_names, slave_names, prefix)}\n")

            sequence = pctg.sequence
            if line_width > 0:
                for i in range(0, len(sequence), line_width):
                    handle.write(sequence[i:i + line_width] + '\n')
            else:
                handle.write(sequence + '\n')

            count += 1
    finally:
        handle.close()

    logger.info(f"Wrote {count} paired contigs to {filepath}")
    return count


def write_placements(
    pctgs: Iterable[PairedContig],
    filepath: Union[str, Path],
    master_names: Sequence[str],
    slave_names: Sequence[str],
    prefix: str = 'pctg'
) -> int:
    """
    Write one TSV row per contig placement.

    Returns:
        Number of rows written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    rows = 0
    with open(filepath, 'w', newline='') as f:
        writer = csv.writer(f, delimiter='\t')
        writer.writerow(PLACEMENT_COLUMNS)
        for pctg in pctgs:
            for info in pctg.placements():
                names = master_names if info.assembly is Assembly.MASTER else slave_names
                writer.writerow([
                    f"{prefix}_{pctg.id}",
                    info.assembly.value,
                    names[info.ctg_id] if 0 <= info.ctg_id < len(names) else info.ctg_id,
                    info.start,
                    info.end,
                    info.strand.value,
                    info.left_gap,
                    info.right_gap,
                ])
                rows += 1

    return rows


def read_placements(filepath: Union[str, Path]) -> List[Dict[str, str]]:
    """Read back a placement table as a list of row dictionaries."""
    with open(filepath, 'r', newline='') as f:
        return list(csv.DictReader(f, delimiter='\t'))
