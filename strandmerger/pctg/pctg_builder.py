#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Paired contig builder: merges master and slave contigs guided by blocks.

Algorithm (one extension step):
  1. Decide which contig of the block pair is new to the paired contig;
     the other one (the counterpart) must already be placed.
  2. Orient the new contig: it is reverse complemented when the counterpart
     placement is reversed XOR the block frames lie on opposite strands.
  3. Anchor the block window of the new contig on the paired contig through
     the counterpart placement.
  4. Search the diagonal shifts around the anchor for the best ungapped
     comparison of the block window and check it against the acceptance
     thresholds.
  5. Accepted: shift the paired contig if the contig starts to its left,
     fill unknown bases, append the right remainder, record the placement.
     Rejected: append the whole contig as a disjoint placement.

The builder holds no per-merge state; the contig pools are only read.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import replace
from typing import Iterator, Optional, Sequence, Tuple

from ..utils.sequence_utils import count_matches, to_base_array
from .alignment import AlignmentFlag, BestPctgCtgAlignment, evaluate_alignment
from .contig import Contig
from .errors import BlockConsistencyError, InvalidStateError
from .frames import Assembly, Block, Frame
from .paired_contig import ContigInPctgInfo, PairedContig
from .settings import MergeSettings

logger = logging.getLogger(__name__)


class PctgBuilder:
    """
    Builder of paired contigs.

    Public operations (``init_by_contig``, ``add_first_*``, ``extend_by_block``,
    ``merge_contig``, ``shift_pctg_of``) never modify their input and return a
    new PairedContig. The splice helpers (``merge_*_in_pos``,
    ``extend_pctg_with_ctg_*``) mutate the paired contig they are given and
    return None.
    """

    def __init__(
        self,
        master_pool,
        slave_pool,
        master_ref_vector: Optional[Sequence[str]] = None,
        slave_ref_vector: Optional[Sequence[str]] = None,
        settings: Optional[MergeSettings] = None,
    ):
        """
        Initialize the builder.

        Args:
            master_pool: ContigPool of the master assembly
            slave_pool: ContigPool of the slave assembly
            master_ref_vector: id -> name table of master contigs (defaults to the pool's)
            slave_ref_vector: id -> name table of slave contigs (defaults to the pool's)
            settings: Limits and thresholds (defaults to MergeSettings())
        """
        self._master_pool = master_pool
        self._slave_pool = slave_pool
        self._master_ref_vector = (
            master_ref_vector if master_ref_vector is not None else master_pool.ref_vector
        )
        self._slave_ref_vector = (
            slave_ref_vector if slave_ref_vector is not None else slave_pool.ref_vector
        )
        self.settings = settings or MergeSettings()

    @property
    def max_alignment(self) -> int:
        return self.settings.max_alignment

    @property
    def max_pctg_gap(self) -> int:
        return self.settings.max_pctg_gap

    @property
    def max_ctg_gap(self) -> int:
        return self.settings.max_ctg_gap

    # ------------------------------------------------------------------
    # Contig access
    # ------------------------------------------------------------------

    def load_master_contig(self, ctg_id: int) -> Contig:
        """Get a master contig by id (ContigNotFoundError if absent)."""
        return self._master_pool.get(ctg_id)

    def load_slave_contig(self, ctg_id: int) -> Contig:
        """Get a slave contig by id (ContigNotFoundError if absent)."""
        return self._slave_pool.get(ctg_id)

    def load_contig(self, ctg_id: int, assembly: Assembly) -> Contig:
        if assembly is Assembly.MASTER:
            return self.load_master_contig(ctg_id)
        return self.load_slave_contig(ctg_id)

    def contig_name(self, ctg_id: int, assembly: Assembly) -> str:
        """Display name of a contig, falling back to its numeric id."""
        names = self._master_ref_vector if assembly is Assembly.MASTER else self._slave_ref_vector
        if 0 <= ctg_id < len(names):
            return names[ctg_id]
        return str(ctg_id)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def init_by_contig(self, pctg_id: int, ctg_id: int) -> PairedContig:
        """Build a paired contig made of a single master contig."""
        return self.add_first_contig_to(PairedContig(pctg_id), ctg_id)

    def add_first_contig_to(self, pctg: PairedContig, ctg_id: int) -> PairedContig:
        """
        Add the first (master) contig to an empty paired contig.

        Args:
            pctg: An empty paired contig
            ctg_id: Master contig identifier

        Returns:
            New paired contig with ``pctg``'s id holding only the contig

        Raises:
            InvalidStateError: If ``pctg`` is not empty
        """
        if not pctg.is_empty():
            raise InvalidStateError(
                f"Cannot add first contig to non-empty paired contig {pctg.id}"
            )
        ctg = self.load_master_contig(ctg_id)
        result = PairedContig(pctg.id)
        result.append(ctg.sequence)
        result.add_info(ContigInPctgInfo(ctg_id, Assembly.MASTER, 0, ctg.length))
        return result

    def add_first_block_to(self, pctg: PairedContig, first_block: Block,
                           last_block: Block) -> PairedContig:
        """
        Seed an empty paired contig from the first block pair of a chain.

        The master contig of the blocks becomes the seed and the slave contig
        is merged into it right away.

        Raises:
            InvalidStateError: If ``pctg`` is not empty
            BlockConsistencyError: If the two blocks join different contigs
        """
        if not pctg.is_empty():
            raise InvalidStateError(
                f"Cannot add first block to non-empty paired contig {pctg.id}"
            )
        self._check_block_pair(first_block, last_block)
        seeded = self.add_first_contig_to(pctg, first_block.master_ctg_id)
        return self.merge_contig(seeded, first_block, last_block, merge_master=False)

    # ------------------------------------------------------------------
    # Extension
    # ------------------------------------------------------------------

    def extend_by_block(self, pctg: PairedContig, first_block: Block,
                        last_block: Block) -> PairedContig:
        """
        Extend a paired contig with the contig of a block pair it lacks.

        Exactly one of the master and slave contigs of the blocks must already
        be placed in ``pctg``; the other one is merged.

        Raises:
            BlockConsistencyError: If neither or both contigs are placed
        """
        self._check_block_pair(first_block, last_block)
        has_master = pctg.contains_master(first_block.master_ctg_id)
        has_slave = pctg.contains_slave(first_block.slave_ctg_id)

        if has_master and has_slave:
            raise BlockConsistencyError(
                f"Paired contig {pctg.id} already holds master contig "
                f"{first_block.master_ctg_id} and slave contig {first_block.slave_ctg_id}"
            )
        if not has_master and not has_slave:
            raise BlockConsistencyError(
                f"Paired contig {pctg.id} holds neither master contig "
                f"{first_block.master_ctg_id} nor slave contig {first_block.slave_ctg_id}"
            )
        return self.merge_contig(pctg, first_block, last_block, merge_master=not has_master)

    def merge_contig(self, pctg: PairedContig, first_block: Block, last_block: Block,
                     merge_master: bool) -> PairedContig:
        """
        Merge the master or slave contig of a block pair into a paired contig.

        Args:
            pctg: Paired contig holding the counterpart contig
            first_block: First block shared by the two contigs
            last_block: Last block shared by the two contigs
            merge_master: Merge the master contig (True) or the slave contig

        Returns:
            New paired contig with the contig merged or appended
        """
        self._check_block_pair(first_block, last_block)
        incoming = Assembly.MASTER if merge_master else Assembly.SLAVE
        counterpart = incoming.other

        ctg_id = first_block.ctg_id(incoming)
        if pctg.contains(ctg_id, incoming):
            raise BlockConsistencyError(
                f"{incoming.value} contig {ctg_id} is already placed in paired contig {pctg.id}"
            )
        counterpart_id = first_block.ctg_id(counterpart)
        if not pctg.contains(counterpart_id, counterpart):
            raise BlockConsistencyError(
                f"{counterpart.value} contig {counterpart_id} is not placed in "
                f"paired contig {pctg.id}"
            )
        pctg_info = pctg.get_info(counterpart_id, counterpart)

        ctg = self.load_contig(ctg_id, incoming)
        reverse = pctg_info.is_reversed != (not first_block.is_concordant)
        first_frame = first_block.frame(incoming)
        last_frame = last_block.frame(incoming)
        for frame in (first_frame, last_frame):
            if not frame.within(ctg.length):
                raise BlockConsistencyError(
                    f"Frame [{frame.start}, {frame.end}] exceeds {incoming.value} contig "
                    f"{self.contig_name(ctg_id, incoming)} of length {ctg.length}"
                )
        if reverse:
            first_frame = first_frame.flipped(ctg.length)
            last_frame = last_frame.flipped(ctg.length)
        ctg = ctg.oriented(reverse)

        pctg_pos = self._anchor_position(
            pctg_info, first_block.frame(counterpart), last_block.frame(counterpart)
        )

        result = pctg.copy()
        best = self.find_best_alignment(result, pctg_info, pctg_pos, ctg, first_frame, last_frame)
        logger.debug(
            f"Pctg {pctg.id}: {incoming.value} contig {self.contig_name(ctg_id, incoming)} "
            f"({'-' if reverse else '+'}) anchored at {pctg_pos}: {best}"
        )
        if merge_master:
            self.merge_master_ctg_in_pos(result, ctg, ctg_id, best)
        else:
            self.merge_slave_ctg_in_pos(result, ctg, ctg_id, best)
        return result

    def shift_pctg_of(self, pctg: PairedContig, shift: int) -> PairedContig:
        """
        Return a copy of ``pctg`` shifted right by ``shift`` positions.

        The copy has ``shift`` unknown bases prepended and every placement
        moved by ``shift``; a zero shift returns an identical copy.
        """
        result = pctg.copy()
        result.shift(shift)
        return result

    # ------------------------------------------------------------------
    # Alignment search
    # ------------------------------------------------------------------

    def _candidate_shifts(self) -> Iterator[int]:
        """Diagonal shifts ordered by distance from the anchor: 0, +1, -1, +2, ..."""
        yield 0
        for k in range(1, max(self.max_pctg_gap, self.max_ctg_gap) + 1):
            if k <= self.max_pctg_gap:
                yield k
            if k <= self.max_ctg_gap:
                yield -k

    @staticmethod
    def _rank(candidate: BestPctgCtgAlignment) -> Tuple[float, int, int, int]:
        # higher homology, closer to anchor, longer, earlier
        return (
            candidate.homology_fraction,
            -(candidate.pctg_gap + candidate.ctg_gap),
            candidate.length,
            -candidate.pctg_start,
        )

    def find_best_alignment(
        self,
        pctg: PairedContig,
        pctg_info: ContigInPctgInfo,
        pctg_pos: int,
        ctg: Contig,
        first_frame: Frame,
        last_frame: Frame,
    ) -> BestPctgCtgAlignment:
        """
        Compute the best alignment between a paired contig and a contig to merge.

        The window ``[min start, max end]`` of the two frames on ``ctg`` is
        expected to start at ``pctg_pos`` on the paired contig. Each shift of
        that diagonal within the gap limits is compared over the window,
        restricted to the counterpart placement ``pctg_info``. Window columns
        that a shift moves off the counterpart placement count as unmatched;
        the shift itself only sets ``pctg_gap`` or ``ctg_gap``.

        Args:
            pctg: Paired contig
            pctg_info: Placement of the counterpart contig in ``pctg``
            pctg_pos: Paired contig position of the window start
            ctg: Contig to merge, already oriented
            first_frame: First frame on ``ctg`` (oriented coordinates)
            last_frame: Last frame on ``ctg`` (oriented coordinates)

        Returns:
            The best accepted alignment, or a flagged one if none qualifies
        """
        settings = self.settings
        lo = min(first_frame.start, last_frame.start)
        hi = max(first_frame.end, last_frame.end)
        if hi >= ctg.length:
            raise ValueError(f"Frame window [{lo}, {hi}] exceeds contig length {ctg.length}")

        pctg_bases = to_base_array(pctg.sequence)
        ctg_bases = to_base_array(ctg.sequence)
        bound_lo = max(0, pctg_info.start)
        bound_hi = min(pctg.total_length, pctg_info.end)
        anchor = pctg_pos - lo
        window = hi - lo + 1

        searched = 0
        truncated = False
        best: Optional[BestPctgCtgAlignment] = None
        best_rejected: Optional[BestPctgCtgAlignment] = None

        for shift in self._candidate_shifts():
            offset = anchor + shift
            p_lo = max(lo + offset, bound_lo)
            p_hi = min(hi + 1 + offset, bound_hi)
            if p_hi <= p_lo:
                continue

            remaining = settings.max_alignment - searched
            if remaining <= 0:
                truncated = True
                break
            overlap = p_hi - p_lo
            n = overlap
            if n > remaining:
                n = remaining
                truncated = True

            c_lo = p_lo - offset
            matches = count_matches(pctg_bases[p_lo:p_lo + n], ctg_bases[c_lo:c_lo + n])
            searched += n
            length = window - (overlap - n)
            candidate = BestPctgCtgAlignment(
                pctg_start=p_lo,
                pctg_end=p_lo + n,
                ctg_start=c_lo,
                ctg_end=c_lo + n,
                matches=matches,
                length=length,
                pctg_gap=max(shift, 0),
                ctg_gap=max(-shift, 0),
                flags=evaluate_alignment(matches, length, settings),
            )

            if candidate.is_mergeable:
                if best is None or self._rank(candidate) > self._rank(best):
                    best = candidate
            elif best_rejected is None or self._rank(candidate) > self._rank(best_rejected):
                best_rejected = candidate

        if truncated:
            logger.debug(
                f"Alignment search budget of {settings.max_alignment} comparisons "
                f"exhausted for contig {ctg.name}"
            )

        chosen = best or best_rejected
        if chosen is None:
            return BestPctgCtgAlignment.disqualified(
                AlignmentFlag.NO_OVERLAP, searched=searched, truncated=truncated
            )
        return replace(chosen, searched=searched, truncated=truncated)

    # ------------------------------------------------------------------
    # Splicing
    # ------------------------------------------------------------------

    def merge_ctg_in_pos(self, pctg: PairedContig, ctg: Contig, ctg_id: int,
                         best_align: BestPctgCtgAlignment, merge_master: bool):
        """
        Merge an oriented contig into ``pctg`` (in place) using an alignment.

        An accepted alignment splices the contig at its offset, shifting the
        paired contig first when the contig starts to its left. A flagged
        alignment, or one that would place the contig over another contig of
        the same assembly, appends the contig after the current end as a
        disjoint placement, leaving the existing sequence untouched.

        Raises:
            InvalidStateError: If the contig is already placed in ``pctg``
        """
        assembly = Assembly.MASTER if merge_master else Assembly.SLAVE
        if pctg.contains(ctg_id, assembly):
            raise InvalidStateError(
                f"{assembly.value} contig {ctg_id} already placed in paired contig {pctg.id}"
            )
        info = ContigInPctgInfo(ctg_id, assembly, 0, ctg.length, is_reversed=ctg.is_reversed)

        if not best_align.is_mergeable:
            reason = f"alignment disqualified ({best_align.flags.describe()})"
        else:
            # range in current coordinates, may start below zero
            conflicts = pctg.overlapping(
                assembly, best_align.offset, best_align.offset + ctg.length
            )
            reason = None
            if conflicts:
                reason = (f"placement would overlap {assembly.value} contig "
                          f"{self.contig_name(conflicts[0].ctg_id, assembly)}")

        if reason is not None:
            start = pctg.total_length
            pctg.append(ctg.sequence)
            pctg.add_info(replace(info, start=start, end=start + ctg.length))
            logger.debug(
                f"Pctg {pctg.id}: {reason}, {assembly.value} contig "
                f"{self.contig_name(ctg_id, assembly)} appended at {start}"
            )
            return

        pos = best_align.pos_pair
        offset = best_align.offset
        if offset < 0:
            self.extend_pctg_with_ctg_upto(pctg, ctg, info, pos, -offset, merge_master)
            pos = (pos[0] - offset, pos[1])
        self.extend_pctg_with_ctg_from(pctg, ctg, info, pos, best_align.gap_pair, merge_master)

    def merge_master_ctg_in_pos(self, pctg: PairedContig, ctg: Contig, ctg_id: int,
                                best_align: BestPctgCtgAlignment):
        """Merge a master contig into ``pctg`` (in place)."""
        self.merge_ctg_in_pos(pctg, ctg, ctg_id, best_align, merge_master=True)

    def merge_slave_ctg_in_pos(self, pctg: PairedContig, ctg: Contig, ctg_id: int,
                               best_align: BestPctgCtgAlignment):
        """Merge a slave contig into ``pctg`` (in place)."""
        self.merge_ctg_in_pos(pctg, ctg, ctg_id, best_align, merge_master=False)

    def extend_pctg_with_ctg_from(
        self,
        pctg: PairedContig,
        ctg: Contig,
        info: ContigInPctgInfo,
        pos: Tuple[int, int],
        gaps: Tuple[int, int],
        is_master: bool,
    ):
        """
        Extend ``pctg`` (in place) to the right with a contig.

        Args:
            pctg: Paired contig
            ctg: Oriented contig
            info: Placement template of ``ctg`` (id, assembly, orientation)
            pos: Matching positions (paired contig, contig); the contig must
                not start before the paired contig
            gaps: Gaps (paired contig side, contig side) recorded in the placement
            is_master: Whether ``ctg`` is a master contig
        """
        self._check_info(info, ctg, is_master)
        pctg_pos, ctg_pos = pos
        start = pctg_pos - ctg_pos
        if start < 0:
            raise ValueError(
                f"Contig starts {-start} bases before paired contig {pctg.id}; shift it first"
            )
        if start > pctg.total_length:
            raise ValueError(f"Contig start {start} beyond paired contig {pctg.id} end")
        if pctg.contains(info.ctg_id, info.assembly):
            raise InvalidStateError(
                f"{info.assembly.value} contig {info.ctg_id} already placed in paired contig {pctg.id}"
            )

        end = start + ctg.length
        overlap_end = min(end, pctg.total_length)
        filled = pctg.fill(start, ctg.sequence[:overlap_end - start])
        if end > pctg.total_length:
            pctg.append(ctg.sequence[pctg.total_length - start:])
        pctg.add_info(replace(info, start=start, end=end, left_gap=gaps[0], right_gap=gaps[1]))

        logger.debug(
            f"Pctg {pctg.id}: {info.assembly.value} contig "
            f"{self.contig_name(info.ctg_id, info.assembly)} placed at [{start}, {end}), "
            f"{filled} gap bases filled, length now {pctg.total_length}"
        )

    def extend_pctg_with_ctg_upto(
        self,
        pctg: PairedContig,
        ctg: Contig,
        info: ContigInPctgInfo,
        pos: Tuple[int, int],
        pctg_shift: int,
        is_master: bool,
    ):
        """
        Extend ``pctg`` (in place) to the left with the first bases of a contig.

        The paired contig is shifted by ``pctg_shift`` and the new leading
        positions receive the first ``pctg_shift`` bases of ``ctg``.

        Args:
            pctg: Paired contig
            ctg: Oriented contig
            info: Placement template of ``ctg``
            pos: First matching positions (paired contig, contig)
            pctg_shift: Bases to add at the left end of ``pctg``
            is_master: Whether ``ctg`` is a master contig
        """
        self._check_info(info, ctg, is_master)
        if pctg_shift < 0:
            raise ValueError(f"Shift must be non-negative, got {pctg_shift}")
        if pctg_shift > ctg.length:
            raise ValueError(
                f"Cannot prepend {pctg_shift} bases from contig of length {ctg.length}"
            )
        if pos[1] - pos[0] != pctg_shift:
            raise ValueError(
                f"Positions {pos} do not imply a left extension of {pctg_shift} bases"
            )
        pctg.shift(pctg_shift)
        pctg.fill(0, ctg.sequence[:pctg_shift])
        logger.debug(
            f"Pctg {pctg.id}: extended {pctg_shift} bases to the left with "
            f"{info.assembly.value} contig {self.contig_name(info.ctg_id, info.assembly)}"
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_block_pair(first_block: Block, last_block: Block):
        if not first_block.same_contigs(last_block):
            raise BlockConsistencyError(
                f"First block joins contigs ({first_block.master_ctg_id}, "
                f"{first_block.slave_ctg_id}) but last block joins "
                f"({last_block.master_ctg_id}, {last_block.slave_ctg_id})"
            )

    @staticmethod
    def _check_info(info: ContigInPctgInfo, ctg: Contig, is_master: bool):
        expected = Assembly.MASTER if is_master else Assembly.SLAVE
        if info.assembly is not expected:
            raise ValueError(f"Placement is for a {info.assembly.value} contig, not {expected.value}")
        if info.size != ctg.length:
            raise ValueError(f"Placement size {info.size} != contig length {ctg.length}")

    @staticmethod
    def _anchor_position(info: ContigInPctgInfo, first_frame: Frame, last_frame: Frame) -> int:
        """Paired contig position where the counterpart's block window starts."""
        lo = min(first_frame.start, last_frame.start)
        hi = max(first_frame.end, last_frame.end)
        if hi >= info.size:
            raise BlockConsistencyError(
                f"Frame window [{lo}, {hi}] exceeds placed contig {info.ctg_id} of size {info.size}"
            )
        return min(info.to_pctg(lo), info.to_pctg(hi))

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
