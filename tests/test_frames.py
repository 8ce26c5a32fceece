#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Tests for frames, blocks, contigs and the contig pool.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from strandmerger.pctg import Assembly, Block, Contig, ContigNotFoundError, Frame, Strand
from strandmerger.pool import ContigPool


class TestStrand:
    """Test strand parsing and flipping."""

    @pytest.mark.parametrize("token", ["+", "F", "forward", " f "])
    def test_parse_forward(self, token):
        assert Strand.parse(token) is Strand.FORWARD

    @pytest.mark.parametrize("token", ["-", "R", "reverse"])
    def test_parse_reverse(self, token):
        assert Strand.parse(token) is Strand.REVERSE

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            Strand.parse("x")

    def test_flipped(self):
        assert Strand.FORWARD.flipped is Strand.REVERSE
        assert Strand.REVERSE.flipped is Strand.FORWARD

    def test_assembly_other(self):
        assert Assembly.MASTER.other is Assembly.SLAVE
        assert Assembly.SLAVE.other is Assembly.MASTER


class TestFrame:
    """Test frame coordinates."""

    def test_length_is_inclusive(self):
        assert Frame(0, Assembly.MASTER, 10, 19).length == 10

    def test_single_base_frame(self):
        assert Frame(0, Assembly.MASTER, 5, 5).length == 1

    def test_invalid_coordinates(self):
        with pytest.raises(ValueError):
            Frame(0, Assembly.MASTER, -1, 5)
        with pytest.raises(ValueError):
            Frame(0, Assembly.MASTER, 6, 5)

    def test_within(self):
        frame = Frame(0, Assembly.SLAVE, 0, 99)
        assert frame.within(100)
        assert not frame.within(99)

    def test_flipped(self):
        """Test mirroring onto the reverse complement."""
        frame = Frame(3, Assembly.SLAVE, 40, 139, Strand.REVERSE)
        flipped = frame.flipped(140)
        assert (flipped.start, flipped.end) == (0, 99)
        assert flipped.strand is Strand.FORWARD
        assert flipped.ctg_id == 3
        assert flipped.flipped(140) == frame

    def test_flipped_out_of_range(self):
        with pytest.raises(ValueError):
            Frame(0, Assembly.SLAVE, 0, 10).flipped(5)


class TestBlock:
    """Test block construction and accessors."""

    def test_accessors(self, make_block):
        block = make_block(1, 0, 9, 2, 5, 14)
        assert block.master_ctg_id == 1
        assert block.slave_ctg_id == 2
        assert block.frame(Assembly.SLAVE).start == 5
        assert block.ctg_id(Assembly.MASTER) == 1
        assert block.is_concordant

    def test_discordant(self, make_block):
        assert not make_block(0, 0, 9, 0, 0, 9, '+', '-').is_concordant
        assert make_block(0, 0, 9, 0, 0, 9, '-', '-').is_concordant

    def test_wrong_assembly(self):
        master = Frame(0, Assembly.MASTER, 0, 9)
        with pytest.raises(ValueError):
            Block(master, master)

    def test_same_contigs(self, make_block):
        a = make_block(0, 0, 9, 1, 0, 9)
        assert a.same_contigs(make_block(0, 20, 29, 1, 30, 39))
        assert not a.same_contigs(make_block(0, 0, 9, 2, 0, 9))


class TestContig:
    """Test contig orientation."""

    def test_reverse_complement(self):
        ctg = Contig(0, "c0", "AACG", quality=(1, 2, 3, 4))
        rc = ctg.reverse_complement()
        assert rc.sequence == "CGTT"
        assert rc.quality == (4, 3, 2, 1)
        assert rc.is_reversed
        assert rc.reverse_complement() == ctg

    def test_oriented(self):
        ctg = Contig(0, "c0", "AACG")
        assert ctg.oriented(False) is ctg
        assert ctg.oriented(True).sequence == "CGTT"

    def test_quality_length_mismatch(self):
        with pytest.raises(ValueError):
            Contig(0, "c0", "ACGT", quality=(1, 2))


class TestContigPool:
    """Test the in-memory contig store."""

    def test_ids_assigned_in_order(self):
        pool = ContigPool.from_sequences([("a", "acgt"), ("b", "GG")], Assembly.SLAVE)
        assert len(pool) == 2
        assert pool.id_of("b") == 1
        assert pool.get(0).sequence == "ACGT"
        assert pool.ref_vector == ["a", "b"]
        assert pool.total_length == 6
        assert 1 in pool and 2 not in pool

    def test_missing_contig(self):
        pool = ContigPool.from_sequences([("a", "ACGT")])
        with pytest.raises(ContigNotFoundError) as exc:
            pool.get(5)
        assert "5" in str(exc.value)
        with pytest.raises(KeyError):
            pool.id_of("missing")

    def test_duplicate_name(self):
        pool = ContigPool()
        pool.add("a", "ACGT")
        with pytest.raises(ValueError):
            pool.add("a", "GG")

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
