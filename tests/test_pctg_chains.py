#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Tests for the block chain driver.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from strandmerger.assembly import (
    BlockChain,
    PctgChainMerger,
    add_unmerged_contigs,
    build_pctg,
    group_block_pairs,
    placed_contig_ids,
    summarize_pctgs,
)
from strandmerger.pctg import Assembly, ContigNotFoundError, InvalidStateError, PairedContig
from strandmerger.pool import ContigPool


@pytest.fixture
def chain_setup(make_builder, make_block, random_sequence):
    """Two master contigs bridged by one slave contig, plus a lone master contig."""
    a = random_sequence(150, seed=11)
    b = random_sequence(150, seed=12)
    lone = random_sequence(60, seed=13)
    slave = a[50:] + b[:100]
    builder = make_builder([a, b, lone], [slave])
    blocks = [
        make_block(0, 50, 99, 0, 0, 49),
        make_block(0, 100, 149, 0, 50, 99),
        make_block(1, 0, 99, 0, 100, 199),
    ]
    return builder, blocks, a + b


class TestGroupBlockPairs:
    """Test collapsing of consecutive blocks."""

    def test_runs(self, make_block):
        b1 = make_block(0, 0, 9, 0, 0, 9)
        b2 = make_block(0, 20, 29, 0, 20, 29)
        b3 = make_block(1, 0, 9, 0, 40, 49)
        assert group_block_pairs([b1, b2, b3]) == [(b1, b2), (b3, b3)]

    def test_empty(self):
        assert group_block_pairs([]) == []


class TestBuildPctg:
    """Test building one chain."""

    def test_build_chain(self, chain_setup):
        builder, blocks, expected = chain_setup
        pctg = build_pctg(builder, 3, BlockChain(3, blocks))

        assert pctg.id == 3
        assert pctg.sequence == expected
        assert sorted(pctg.master_ctgs) == [0, 1]
        assert sorted(pctg.slave_ctgs) == [0]
        pctg.validate()

    def test_invalid_result_raises(self, chain_setup, monkeypatch):
        """Test a paired contig breaking its invariants is not returned."""
        builder, blocks, _ = chain_setup

        def unplaced(pctg, first_block, last_block):
            bad = PairedContig(pctg.id)
            bad.append("ACGT")
            return bad

        monkeypatch.setattr(builder, "add_first_block_to", unplaced)
        with pytest.raises(InvalidStateError):
            build_pctg(builder, 0, BlockChain(0, blocks[:2]))

    def test_empty_chain(self, chain_setup):
        builder, _, _ = chain_setup
        with pytest.raises(ValueError):
            build_pctg(builder, 0, BlockChain(0, []))


class TestPctgChainMerger:
    """Test the multi-chain driver."""

    def test_invalid_on_error(self, chain_setup):
        builder, _, _ = chain_setup
        with pytest.raises(ValueError):
            PctgChainMerger(builder, on_error='ignore')

    @pytest.mark.parametrize("threads", [1, 3])
    def test_skip_broken_chain(self, chain_setup, make_block, threads):
        builder, blocks, expected = chain_setup
        broken = BlockChain(1, [make_block(2, 0, 9, 5, 0, 9)], name="broken")
        chains = [BlockChain(0, blocks, name="good"), broken]

        result = PctgChainMerger(builder, threads=threads).merge_chains(chains)

        assert [p.id for p in result.pctgs] == [0]
        assert result.pctgs[0].sequence == expected
        assert result.num_failed == 1
        assert "not found" in result.failed[1]

    def test_abort_on_error(self, chain_setup, make_block):
        builder, blocks, _ = chain_setup
        chains = [BlockChain(0, blocks), BlockChain(1, [make_block(2, 0, 9, 5, 0, 9)])]
        with pytest.raises(ContigNotFoundError):
            PctgChainMerger(builder, on_error='abort').merge_chains(chains)

    def test_results_ordered_by_chain(self, make_builder, make_block, random_sequence):
        seqs = [random_sequence(120, seed=s) for s in range(4)]
        builder = make_builder(seqs, seqs)
        chains = [BlockChain(i, [make_block(i, 0, 119, i, 0, 119)]) for i in reversed(range(4))]

        result = PctgChainMerger(builder, threads=4).merge_chains(chains)

        assert [p.id for p in result.pctgs] == [0, 1, 2, 3]
        assert all(p.total_length == 120 for p in result.pctgs)


class TestUnmergedAndSummary:
    """Test singleton output and statistics."""

    def test_add_unmerged(self, chain_setup):
        builder, blocks, _ = chain_setup
        result = PctgChainMerger(builder).merge_chains([BlockChain(0, blocks)])
        master_pool = ContigPool.from_sequences(
            [(f"m{c.ctg_id}", c.sequence) for c in map(builder.load_master_contig, range(3))]
        )

        added = add_unmerged_contigs(result, builder, master_pool)

        assert added == 1
        assert [p.id for p in result.pctgs] == [0, 1]
        assert result.pctgs[1].contains_master(2)
        assert placed_contig_ids(result.pctgs, Assembly.MASTER) == {0, 1, 2}
        assert placed_contig_ids(result.pctgs, Assembly.SLAVE) == {0}

    def test_summary(self, make_builder, random_sequence):
        builder = make_builder([random_sequence(300, 1), random_sequence(100, 2)], [])
        pctgs = [builder.init_by_contig(0, 0), builder.init_by_contig(1, 1), PairedContig(2)]

        stats = summarize_pctgs(pctgs)

        assert stats['count'] == 2
        assert stats['total_length'] == 400
        assert stats['longest'] == 300
        assert stats['n50'] == 300
        assert stats['master_placements'] == 2

    def test_summary_empty(self):
        assert summarize_pctgs([])['n50'] == 0

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
