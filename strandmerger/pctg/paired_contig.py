#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Paired contig data structures.

A PairedContig is the consensus sequence under construction together with
one ContigInPctgInfo per master or slave contig folded into it. Master and
slave placements are kept in separate maps because the two assemblies number
their contigs independently.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional

from ..utils.sequence_utils import GAP_BASE
from .errors import InvalidStateError
from .frames import Assembly, Strand

logger = logging.getLogger(__name__)


# ============================================================================
# Placement metadata
# ============================================================================

@dataclass(frozen=True)
class ContigInPctgInfo:
    """
    Placement of one source contig inside a paired contig.

    ``left_gap`` and ``right_gap`` are the gaps of the alignment that placed
    the contig: gap columns opened on the paired contig side and on the
    contig side respectively. Both are zero for seeds and disjoint placements.
    """
    ctg_id: int
    assembly: Assembly
    start: int  # 0-based inclusive, paired contig coordinates
    end: int    # exclusive
    is_reversed: bool = False
    left_gap: int = 0
    right_gap: int = 0

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid placement range [{self.start}, {self.end})")
        if self.left_gap < 0 or self.right_gap < 0:
            raise ValueError("Placement gaps must be non-negative")

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def strand(self) -> Strand:
        return Strand.REVERSE if self.is_reversed else Strand.FORWARD

    def shifted(self, shift: int) -> "ContigInPctgInfo":
        """Return the placement moved right by ``shift`` positions."""
        return replace(self, start=self.start + shift, end=self.end + shift)

    def to_pctg(self, ctg_pos: int) -> int:
        """Map a position on the (forward) contig to paired contig coordinates."""
        if not 0 <= ctg_pos < self.size:
            raise ValueError(f"Position {ctg_pos} outside contig of size {self.size}")
        if self.is_reversed:
            return self.start + self.size - 1 - ctg_pos
        return self.start + ctg_pos


# ============================================================================
# Paired contig
# ============================================================================

class PairedContig:
    """
    Consensus sequence built by merging master and slave contigs.

    The sequence only ever grows: merges append bases, prepend bases
    through a shift, or fill ``N`` positions.
    """

    def __init__(self, pctg_id: int):
        self.id = pctg_id
        self._sequence = ""
        self._master_ctgs: Dict[int, ContigInPctgInfo] = {}
        self._slave_ctgs: Dict[int, ContigInPctgInfo] = {}

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def sequence(self) -> str:
        return self._sequence

    @property
    def total_length(self) -> int:
        return len(self._sequence)

    def __len__(self) -> int:
        return len(self._sequence)

    def __repr__(self) -> str:
        return (f"PairedContig(id={self.id}, length={self.total_length}, "
                f"master={sorted(self._master_ctgs)}, slave={sorted(self._slave_ctgs)})")

    def is_empty(self) -> bool:
        return not self._sequence and not self._master_ctgs and not self._slave_ctgs

    @property
    def master_ctgs(self) -> Dict[int, ContigInPctgInfo]:
        """Read-only view of the master placements (copy)."""
        return dict(self._master_ctgs)

    @property
    def slave_ctgs(self) -> Dict[int, ContigInPctgInfo]:
        """Read-only view of the slave placements (copy)."""
        return dict(self._slave_ctgs)

    def _placements(self, assembly: Assembly) -> Dict[int, ContigInPctgInfo]:
        return self._master_ctgs if assembly is Assembly.MASTER else self._slave_ctgs

    def contains(self, ctg_id: int, assembly: Assembly) -> bool:
        return ctg_id in self._placements(assembly)

    def contains_master(self, ctg_id: int) -> bool:
        return ctg_id in self._master_ctgs

    def contains_slave(self, ctg_id: int) -> bool:
        return ctg_id in self._slave_ctgs

    def get_info(self, ctg_id: int, assembly: Assembly) -> ContigInPctgInfo:
        """
        Get the placement of a contig.

        Raises:
            InvalidStateError: If the contig is not part of this paired contig
        """
        try:
            return self._placements(assembly)[ctg_id]
        except KeyError:
            raise InvalidStateError(
                f"{assembly.value} contig {ctg_id} is not placed in paired contig {self.id}"
            ) from None

    def placements(self) -> Iterator[ContigInPctgInfo]:
        """Iterate over all placements, master first, by position."""
        yield from sorted(self._master_ctgs.values(), key=lambda i: (i.start, i.ctg_id))
        yield from sorted(self._slave_ctgs.values(), key=lambda i: (i.start, i.ctg_id))

    def num_placements(self) -> int:
        return len(self._master_ctgs) + len(self._slave_ctgs)

    def overlapping(self, assembly: Assembly, start: int, end: int) -> List[ContigInPctgInfo]:
        """Placements of ``assembly`` sharing at least one position with ``[start, end)``."""
        return [info for info in self._placements(assembly).values()
                if info.start < end and start < info.end]

    # ------------------------------------------------------------------
    # Mutators (used by PctgBuilder on an exclusively owned instance)
    # ------------------------------------------------------------------

    def add_info(self, info: ContigInPctgInfo):
        """
        Record a placement.

        Raises:
            InvalidStateError: If the contig is already placed or the range
                falls outside the sequence
        """
        placements = self._placements(info.assembly)
        if info.ctg_id in placements:
            raise InvalidStateError(
                f"{info.assembly.value} contig {info.ctg_id} already placed "
                f"in paired contig {self.id}"
            )
        if info.end > self.total_length:
            raise InvalidStateError(
                f"Placement [{info.start}, {info.end}) exceeds paired contig "
                f"{self.id} of length {self.total_length}"
            )
        placements[info.ctg_id] = info

    def append(self, bases: str):
        """Append bases to the right end."""
        self._sequence += bases

    def fill(self, start: int, bases: str) -> int:
        """
        Overwrite gap bases starting at ``start`` with ``bases``.

        Only ``N`` positions are replaced; known bases are kept.

        Returns:
            Number of positions filled
        """
        end = start + len(bases)
        if start < 0 or end > self.total_length:
            raise ValueError(
                f"Fill range [{start}, {end}) outside paired contig of length {self.total_length}"
            )
        current = self._sequence[start:end]
        if GAP_BASE not in current:
            return 0
        merged = []
        filled = 0
        for old, new in zip(current, bases):
            if old == GAP_BASE and new != GAP_BASE:
                merged.append(new)
                filled += 1
            else:
                merged.append(old)
        self._sequence = self._sequence[:start] + ''.join(merged) + self._sequence[end:]
        return filled

    def shift(self, shift: int):
        """
        Prepend ``shift`` gap bases and move every placement accordingly.

        All new state is computed before anything is assigned, so a failure
        leaves the paired contig untouched.
        """
        if shift < 0:
            raise ValueError(f"Shift must be non-negative, got {shift}")
        if shift == 0:
            return
        master = {cid: info.shifted(shift) for cid, info in self._master_ctgs.items()}
        slave = {cid: info.shifted(shift) for cid, info in self._slave_ctgs.items()}
        sequence = GAP_BASE * shift + self._sequence
        self._master_ctgs, self._slave_ctgs, self._sequence = master, slave, sequence

    def copy(self, pctg_id: Optional[int] = None) -> "PairedContig":
        """Return an independent copy (placements are immutable and shared)."""
        other = PairedContig(self.id if pctg_id is None else pctg_id)
        other._sequence = self._sequence
        other._master_ctgs = dict(self._master_ctgs)
        other._slave_ctgs = dict(self._slave_ctgs)
        return other

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def validate(self):
        """
        Check the structural invariants.

        Raises:
            InvalidStateError: On the first violated invariant
        """
        errors = self.check()
        if errors:
            raise InvalidStateError(f"Paired contig {self.id}: " + "; ".join(errors))

    def check(self) -> List[str]:
        """Return the list of violated invariants (empty if consistent)."""
        errors = []
        if self.total_length and not self.num_placements():
            errors.append("non-empty sequence without placements")
        for assembly in Assembly:
            for ctg_id, info in self._placements(assembly).items():
                if info.ctg_id != ctg_id or info.assembly is not assembly:
                    errors.append(f"placement key mismatch for {assembly.value} contig {ctg_id}")
                if info.start < 0 or info.end > self.total_length:
                    errors.append(
                        f"{assembly.value} contig {ctg_id} placed at "
                        f"[{info.start}, {info.end}) outside [0, {self.total_length})"
                    )
            # only a master and a slave contig may share positions
            ordered = sorted(self._placements(assembly).values(), key=lambda i: (i.start, i.end))
            reach = None
            for info in ordered:
                if reach is not None and info.start < reach.end and info.size:
                    errors.append(
                        f"{assembly.value} contigs {reach.ctg_id} and {info.ctg_id} overlap "
                        f"at [{info.start}, {min(reach.end, info.end)})"
                    )
                if reach is None or info.end > reach.end:
                    reach = info
        return errors

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
