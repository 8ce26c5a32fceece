#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Tests for FASTA, block table and placement I/O.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import gzip

import pytest

from strandmerger.io import (
    BlockFormatError,
    load_contig_pool,
    pctg_header,
    read_blocks,
    read_contigs,
    read_placements,
    write_paired_contigs,
    write_placements,
)
from strandmerger.pctg import Assembly, MergeSettings, PairedContig, PctgBuilder, Strand

BLOCK_HEADER = ("chain_id\tmaster_ctg\tmaster_start\tmaster_end\tmaster_strand\t"
                "slave_ctg\tslave_start\tslave_end\tslave_strand\n")


@pytest.fixture
def pools(tmp_path):
    """Master and slave pools loaded from small FASTA files."""
    master = tmp_path / "master.fasta"
    master.write_text(">m1\nacgtacgtaa\n>m2 second contig\nGGGGCCCCAA\nTT\n")
    slave = tmp_path / "slave.fa"
    slave.write_text(">s1\nACGTAAGTAACCC\n")
    return (load_contig_pool(master, Assembly.MASTER),
            load_contig_pool(slave, Assembly.SLAVE))


class TestContigInput:
    """Test FASTA loading."""

    def test_load_pool(self, pools):
        master, slave = pools
        assert master.ref_vector == ["m1", "m2"]
        assert master.get(0).sequence == "ACGTACGTAA"
        assert master.get(1).length == 12
        assert slave.assembly is Assembly.SLAVE

    def test_gzipped_input(self, tmp_path):
        path = tmp_path / "contigs.fa.gz"
        with gzip.open(path, "wt") as f:
            f.write(">c1\nACGT\n>c2\nAC\n")
        assert list(read_contigs(path, min_length=3)) == [("c1", "ACGT")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(read_contigs(tmp_path / "absent.fa"))


class TestBlockInput:
    """Test block table parsing."""

    def test_read_blocks(self, tmp_path, pools):
        path = tmp_path / "blocks.tsv"
        path.write_text(
            "# comment\n" + BLOCK_HEADER
            + "c7\tm1\t0\t9\t+\ts1\t0\t9\t+\n"
            + "\n"
            + "c2\tm2\t0\t5\t+\ts1\t3\t8\t-\n"
            + "c7\tm1\t2\t4\tF\ts1\t2\t4\tF\n"
        )
        chains = read_blocks(path, *pools)

        assert [(c.chain_id, c.name, len(c)) for c in chains] == [(0, "c7", 2), (1, "c2", 1)]
        block = chains[1].blocks[0]
        assert block.master_ctg_id == 1
        assert block.slave_frame.strand is Strand.REVERSE
        assert not block.is_concordant

    def test_missing_column(self, tmp_path, pools):
        path = tmp_path / "blocks.tsv"
        path.write_text("chain_id\tmaster_ctg\n1\tm1\n")
        with pytest.raises(BlockFormatError, match="lacks columns"):
            read_blocks(path, *pools)

    @pytest.mark.parametrize("row", [
        "c1\tunknown\t0\t9\t+\ts1\t0\t9\t+\n",
        "c1\tm1\tx\t9\t+\ts1\t0\t9\t+\n",
        "c1\tm1\t0\t9\t?\ts1\t0\t9\t+\n",
        "c1\tm1\t0\t10\t+\ts1\t0\t9\t+\n",
        "c1\tm1\t5\t2\t+\ts1\t0\t9\t+\n",
    ])
    def test_invalid_rows(self, tmp_path, pools, row):
        path = tmp_path / "blocks.tsv"
        path.write_text(BLOCK_HEADER + row)
        with pytest.raises(BlockFormatError, match="Row 2"):
            read_blocks(path, *pools)


class TestOutput:
    """Test paired contig and placement output."""

    @pytest.fixture
    def merged(self, pools, make_block):
        master, slave = pools
        builder = PctgBuilder(master, slave, settings=MergeSettings(min_alignment=5))
        block = make_block(0, 0, 9, 0, 0, 9)
        return [builder.add_first_block_to(PairedContig(0), block, block),
                builder.init_by_contig(1, 1), PairedContig(2)]

    def test_header(self, merged, pools):
        master, slave = pools
        header = pctg_header(merged[0], master.ref_vector, slave.ref_vector)
        assert header == "pctg_0 length=13 master=m1 slave=s1"
        assert pctg_header(merged[1], master.ref_vector, slave.ref_vector).endswith("slave=-")

    def test_write_fasta(self, tmp_path, merged, pools):
        master, slave = pools
        path = tmp_path / "out" / "pctgs.fasta"

        count = write_paired_contigs(merged, path, master.ref_vector, slave.ref_vector,
                                     line_width=5)

        assert count == 2
        lines = path.read_text().splitlines()
        assert lines[0] == ">pctg_0 length=13 master=m1 slave=s1"
        assert lines[1:4] == ["ACGTA", "CGTAA", "CCC"]
        records = list(read_contigs(path))
        assert records[0] == ("pctg_0", "ACGTACGTAACCC")

    def test_write_placements(self, tmp_path, merged, pools):
        master, slave = pools
        path = tmp_path / "placements.tsv"

        rows = write_placements(merged, path, master.ref_vector, slave.ref_vector, prefix="x")

        assert rows == 3
        table = read_placements(path)
        assert table[0] == {
            "pctg": "x_0", "assembly": "master", "contig": "m1", "start": "0",
            "end": "10", "strand": "+", "left_gap": "0", "right_gap": "0",
        }
        assert table[1]["contig"] == "s1"
        assert table[2]["pctg"] == "x_1"

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
