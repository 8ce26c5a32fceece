#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Tests for sequence utility functions.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import numpy as np
import pytest

from strandmerger.utils.sequence_utils import (
    GAP_BASE,
    count_matches,
    reverse_complement,
    to_base_array,
)


class TestReverseComplement:
    """Test reverse complement function."""

    def test_simple_sequence(self):
        """Test reverse complement of simple sequence."""
        assert reverse_complement("ATCG") == "CGAT"

    def test_palindrome(self):
        """Test palindromic sequence."""
        assert reverse_complement("GAATTC") == "GAATTC"

    def test_double_reverse_is_identity(self):
        """Test that two reverse complements give back the input."""
        seq = "ACGTTGCANNACG"
        assert reverse_complement(reverse_complement(seq)) == seq

    def test_gap_bases_preserved(self):
        """Test that N stays N."""
        assert reverse_complement("ANNC") == "GNNT"

    def test_lowercase(self):
        """Test lowercase input keeps its case."""
        assert reverse_complement("acgt") == "acgt"

    def test_empty(self):
        assert reverse_complement("") == ""


class TestBaseArrays:
    """Test numpy base comparison helpers."""

    def test_to_base_array_uppercases(self):
        arr = to_base_array("acgT")
        assert arr.dtype == np.uint8
        assert bytes(arr) == b"ACGT"

    def test_count_matches(self):
        """Test matching positions are counted."""
        assert count_matches(to_base_array("ACGTAC"), to_base_array("ACGAAC")) == 5

    def test_gap_never_matches(self):
        """Test that N never counts as a match, even against N."""
        a = to_base_array("AN" + GAP_BASE)
        b = to_base_array("ANA")
        assert count_matches(a, b) == 1

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            count_matches(to_base_array("ACG"), to_base_array("AC"))

    def test_empty_arrays(self):
        assert count_matches(to_base_array(""), to_base_array("")) == 0

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
