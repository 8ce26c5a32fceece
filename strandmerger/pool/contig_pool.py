#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

In-memory store of the contigs of one assembly, indexed by id.

Ids are assigned densely in insertion order, so the pool doubles as the
id -> name table (``ref_vector``) used to label merged output.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..pctg.contig import Contig
from ..pctg.errors import ContigNotFoundError
from ..pctg.frames import Assembly

logger = logging.getLogger(__name__)


class ContigPool:
    """
    Read-only store of contigs for one assembly.
    
    Features:
    - Lookup by numeric id (``get``) or by name (``id_of``)
    - id -> name table for output labelling
    - Safe to share between threads once built
    """

    def __init__(self, assembly: Assembly = Assembly.MASTER):
        self.assembly = assembly
        self._contigs: List[Contig] = []
        self._ids_by_name: Dict[str, int] = {}

    @classmethod
    def from_sequences(cls, sequences: Iterable[Tuple[str, str]],
                       assembly: Assembly = Assembly.MASTER) -> "ContigPool":
        """
        Build a pool from (name, sequence) pairs.
        
        Args:
            sequences: Iterable of (name, sequence)
            assembly: Assembly the contigs belong to
        
        Returns:
            Pool with ids assigned in iteration order
        """
        pool = cls(assembly)
        for name, sequence in sequences:
            pool.add(name, sequence)
        return pool

    def add(self, name: str, sequence: str,
            quality: Optional[Tuple[int, ...]] = None) -> int:
        """
        Add a contig and return its id.
        
        Raises:
            ValueError: If a contig with the same name is already present
        """
        if name in self._ids_by_name:
            raise ValueError(f"Duplicate {self.assembly.value} contig name: {name}")
        ctg_id = len(self._contigs)
        self._contigs.append(Contig(ctg_id, name, sequence.upper(), quality))
        self._ids_by_name[name] = ctg_id
        return ctg_id

    def get(self, ctg_id: int) -> Contig:
        """
        Get a contig by id.
        
        Raises:
            ContigNotFoundError: If the id is not in the pool
        """
        if not isinstance(ctg_id, int) or not 0 <= ctg_id < len(self._contigs):
            raise ContigNotFoundError(ctg_id, self.assembly.value)
        return self._contigs[ctg_id]

    def id_of(self, name: str) -> int:
        """
        Get the id of a contig by name.
        
        Raises:
            ContigNotFoundError: If no contig has this name
        """
        try:
            return self._ids_by_name[name]
        except KeyError:
            raise ContigNotFoundError(name, self.assembly.value) from None

    def __contains__(self, ctg_id: int) -> bool:
        return isinstance(ctg_id, int) and 0 <= ctg_id < len(self._contigs)

    def __len__(self) -> int:
        return len(self._contigs)

    def __iter__(self) -> Iterator[Contig]:
        return iter(self._contigs)

    @property
    def ref_vector(self) -> List[str]:
        """Contig names indexed by id."""
        return [ctg.name for ctg in self._contigs]

    @property
    def total_length(self) -> int:
        return sum(ctg.length for ctg in self._contigs)

    def __repr__(self) -> str:
        return f"ContigPool(assembly={self.assembly.value}, contigs={len(self)})"

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
