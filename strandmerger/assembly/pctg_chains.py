#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Block chain driver: turns ordered chains of blocks into paired contigs.

Each chain is processed sequentially (every extension depends on the
previous paired contig); independent chains run concurrently on a thread
pool since the builder and the contig pools are read-only.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from ..pctg.errors import PctgError
from ..pctg.frames import Assembly, Block
from ..pctg.paired_contig import PairedContig
from ..pctg.pctg_builder import PctgBuilder

logger = logging.getLogger(__name__)


ON_ERROR_CHOICES = ('skip', 'abort')


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class BlockChain:
    """Ordered blocks describing one connected region shared by both assemblies."""
    chain_id: int
    blocks: List[Block] = field(default_factory=list)
    name: Optional[str] = None

    def __len__(self) -> int:
        return len(self.blocks)


@dataclass
class ChainMergeResult:
    """Paired contigs built from a set of chains."""
    pctgs: List[PairedContig] = field(default_factory=list)
    failed: Dict[int, str] = field(default_factory=dict)  # chain id -> error
    runtime: float = 0.0

    @property
    def num_failed(self) -> int:
        return len(self.failed)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def group_block_pairs(blocks: List[Block]) -> List[Tuple[Block, Block]]:
    """
    Collapse runs of consecutive blocks joining the same contigs.

    Returns:
        List of (first_block, last_block) pairs, one per run, in chain order
    """
    pairs: List[Tuple[Block, Block]] = []
    run_start: Optional[Block] = None
    run_end: Optional[Block] = None

    for block in blocks:
        if run_start is not None and block.same_contigs(run_start):
            run_end = block
            continue
        if run_start is not None:
            pairs.append((run_start, run_end))
        run_start = run_end = block

    if run_start is not None:
        pairs.append((run_start, run_end))
    return pairs


def build_pctg(builder: PctgBuilder, pctg_id: int, chain: BlockChain) -> PairedContig:
    """
    Build the paired contig of one chain.

    The first block pair seeds an empty paired contig; every following pair
    extends it.

    Raises:
        PctgError: On a missing contig, an inconsistent chain, or a paired
            contig that breaks its invariants
    """
    pairs = group_block_pairs(chain.blocks)
    if not pairs:
        raise ValueError(f"Chain {chain.chain_id} has no blocks")

    first_block, last_block = pairs[0]
    pctg = builder.add_first_block_to(PairedContig(pctg_id), first_block, last_block)
    for first_block, last_block in pairs[1:]:
        pctg = builder.extend_by_block(pctg, first_block, last_block)
    pctg.validate()

    logger.debug(
        f"Chain {chain.chain_id}: {len(pairs)} block pairs -> paired contig "
        f"{pctg_id} of {pctg.total_length} bp"
    )
    return pctg


def placed_contig_ids(pctgs: List[PairedContig], assembly: Assembly) -> Set[int]:
    """Collect the ids of all contigs of ``assembly`` placed in ``pctgs``."""
    ids: Set[int] = set()
    for pctg in pctgs:
        ids.update(pctg.master_ctgs if assembly is Assembly.MASTER else pctg.slave_ctgs)
    return ids


def add_unmerged_contigs(result: ChainMergeResult, builder: PctgBuilder, master_pool) -> int:
    """
    Append every master contig not placed anywhere as a singleton paired contig.

    Returns:
        Number of singletons added
    """
    placed = placed_contig_ids(result.pctgs, Assembly.MASTER)
    next_id = max((p.id for p in result.pctgs), default=-1) + 1
    added = 0
    for ctg in master_pool:
        if ctg.ctg_id in placed:
            continue
        result.pctgs.append(builder.init_by_contig(next_id, ctg.ctg_id))
        next_id += 1
        added += 1
    if added:
        logger.info(f"Added {added} unmerged master contigs as singleton paired contigs")
    return added


def _n50(lengths: List[int]) -> int:
    total = sum(lengths)
    running = 0
    for length in sorted(lengths, reverse=True):
        running += length
        if running * 2 >= total:
            return length
    return 0


def summarize_pctgs(pctgs: List[PairedContig]) -> Dict[str, Any]:
    """
    Summary statistics of a set of paired contigs.

    Returns:
        Dictionary with count, total_length, longest, n50,
        master_placements and slave_placements
    """
    lengths = [p.total_length for p in pctgs if not p.is_empty()]
    return {
        'count': len(lengths),
        'total_length': sum(lengths),
        'longest': max(lengths, default=0),
        'n50': _n50(lengths),
        'master_placements': sum(len(p.master_ctgs) for p in pctgs),
        'slave_placements': sum(len(p.slave_ctgs) for p in pctgs),
    }


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

class PctgChainMerger:
    """
    Build paired contigs from independent block chains.

    Structural errors (missing contig, inconsistent chain) abort only the
    chain they occur in when ``on_error='skip'``; with ``on_error='abort'``
    the first one is re-raised.
    """

    def __init__(self, builder: PctgBuilder, threads: int = 1, on_error: str = 'skip'):
        """
        Initialize the chain merger.

        Args:
            builder: Paired contig builder shared by all workers
            threads: Number of worker threads
            on_error: 'skip' or 'abort'
        """
        if on_error not in ON_ERROR_CHOICES:
            raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")
        self.builder = builder
        self.threads = max(1, int(threads))
        self.on_error = on_error
        self.logger = logging.getLogger(__name__)

    def merge_chain(self, pctg_id: int, chain: BlockChain) -> PairedContig:
        """Build the paired contig of a single chain."""
        return build_pctg(self.builder, pctg_id, chain)

    def _record_failure(self, result: ChainMergeResult, chain: BlockChain, error: Exception):
        if self.on_error == 'abort':
            raise error
        label = chain.name if chain.name is not None else chain.chain_id
        self.logger.warning(f"Skipping chain {label}: {error}")
        result.failed[chain.chain_id] = str(error)

    def merge_chains(self, chains: List[BlockChain]) -> ChainMergeResult:
        """
        Build one paired contig per chain.

        Paired contig ids equal chain ids; results are ordered by chain id.

        Returns:
            ChainMergeResult with the paired contigs and the failed chains
        """
        start_time = time.time()
        result = ChainMergeResult()
        built: Dict[int, PairedContig] = {}

        if self.threads == 1 or len(chains) <= 1:
            for chain in chains:
                try:
                    built[chain.chain_id] = self.merge_chain(chain.chain_id, chain)
                except PctgError as e:
                    self._record_failure(result, chain, e)
        else:
            with ThreadPoolExecutor(max_workers=self.threads) as executor:
                futures = {
                    executor.submit(self.merge_chain, chain.chain_id, chain): chain
                    for chain in chains
                }
                for fut in as_completed(futures):
                    chain = futures[fut]
                    try:
                        built[chain.chain_id] = fut.result()
                    except PctgError as e:
                        self._record_failure(result, chain, e)

        result.pctgs = [built[cid] for cid in sorted(built)]
        result.runtime = time.time() - start_time
        self.logger.info(
            f"Merged {len(result.pctgs)} of {len(chains)} chains "
            f"({result.num_failed} skipped) in {result.runtime:.3f}s"
        )
        return result
