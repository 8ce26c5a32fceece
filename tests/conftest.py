#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Pytest configuration and shared fixtures.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import random

import pytest

from strandmerger.pctg import Assembly, Block, Frame, MergeSettings, PctgBuilder, Strand
from strandmerger.pool import ContigPool


def _random_sequence(length: int, seed: int) -> str:
    rng = random.Random(seed)
    return ''.join(rng.choice('ACGT') for _ in range(length))


def _block(m_id, m_start, m_end, s_id, s_start, s_end, m_strand='+', s_strand='+'):
    return Block(
        Frame(m_id, Assembly.MASTER, m_start, m_end, Strand.parse(m_strand)),
        Frame(s_id, Assembly.SLAVE, s_start, s_end, Strand.parse(s_strand)),
    )


@pytest.fixture
def random_sequence():
    """Deterministic pseudo-random DNA generator: random_sequence(length, seed)."""
    return _random_sequence


@pytest.fixture
def make_block():
    """Block factory: make_block(m_id, m_start, m_end, s_id, s_start, s_end, m_strand, s_strand)."""
    return _block


@pytest.fixture
def make_builder():
    """Builder factory from master/slave sequence lists and optional settings."""
    def factory(master_seqs, slave_seqs, **settings):
        master = ContigPool.from_sequences(
            [(f"m{i}", s) for i, s in enumerate(master_seqs)], Assembly.MASTER
        )
        slave = ContigPool.from_sequences(
            [(f"s{i}", s) for i, s in enumerate(slave_seqs)], Assembly.SLAVE
        )
        return PctgBuilder(master, slave, settings=MergeSettings(**settings))
    return factory


@pytest.fixture
def master_seq():
    """Master fragment of the reference merge scenario."""
    return "ACGTACGTAA"


@pytest.fixture
def slave_seq():
    """Slave fragment sharing M[0:10] with one mismatch, plus 'CCC'."""
    return "ACGTAAGTAACCC"

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
