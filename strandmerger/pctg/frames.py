#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandMerger v0.1.0

Frames and blocks, the anchors shared by the master and slave assemblies.

A Frame is an oriented window over one contig; a Block pairs a master frame
with the slave frame known to describe the same genomic region. Coordinates
are 0-based and both ends are inclusive.

Author: StrandMerger Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass
from enum import Enum


class Assembly(str, Enum):
    """The two source assemblies being merged."""
    MASTER = "master"
    SLAVE = "slave"

    @property
    def other(self) -> "Assembly":
        return Assembly.SLAVE if self is Assembly.MASTER else Assembly.MASTER


class Strand(str, Enum):
    """Orientation of a frame on its contig."""
    FORWARD = "+"
    REVERSE = "-"

    @property
    def flipped(self) -> "Strand":
        return Strand.REVERSE if self is Strand.FORWARD else Strand.FORWARD

    @classmethod
    def parse(cls, value: str) -> "Strand":
        """Parse '+', '-', 'F' or 'R' (case-insensitive)."""
        token = str(value).strip().upper()
        if token in ('+', 'F', 'FORWARD'):
            return cls.FORWARD
        if token in ('-', 'R', 'REVERSE'):
            return cls.REVERSE
        raise ValueError(f"Invalid strand: {value!r}")


@dataclass(frozen=True)
class Frame:
    """A bounded, oriented window over a single contig."""
    ctg_id: int
    assembly: Assembly
    start: int  # 0-based inclusive
    end: int    # 0-based inclusive
    strand: Strand = Strand.FORWARD

    def __post_init__(self):
        """Validate coordinates."""
        if self.start < 0:
            raise ValueError(f"Frame start must be >= 0, got {self.start}")
        if self.start > self.end:
            raise ValueError(f"Frame start {self.start} > end {self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def within(self, ctg_length: int) -> bool:
        """Check that the frame fits a contig of ``ctg_length`` bases."""
        return self.end < ctg_length

    def flipped(self, ctg_length: int) -> "Frame":
        """
        Return the same region expressed on the reverse complement of its contig.
        
        Args:
            ctg_length: Length of the contig the frame lies on
        
        Returns:
            Frame with mirrored coordinates and opposite strand
        """
        if not self.within(ctg_length):
            raise ValueError(
                f"Frame [{self.start}, {self.end}] exceeds contig length {ctg_length}"
            )
        return Frame(
            ctg_id=self.ctg_id,
            assembly=self.assembly,
            start=ctg_length - 1 - self.end,
            end=ctg_length - 1 - self.start,
            strand=self.strand.flipped,
        )


@dataclass(frozen=True)
class Block:
    """A pair of frames, one per assembly, describing the same region."""
    master_frame: Frame
    slave_frame: Frame

    def __post_init__(self):
        if self.master_frame.assembly is not Assembly.MASTER:
            raise ValueError("Block master frame must lie on the master assembly")
        if self.slave_frame.assembly is not Assembly.SLAVE:
            raise ValueError("Block slave frame must lie on the slave assembly")

    @property
    def master_ctg_id(self) -> int:
        return self.master_frame.ctg_id

    @property
    def slave_ctg_id(self) -> int:
        return self.slave_frame.ctg_id

    @property
    def is_concordant(self) -> bool:
        """True when both frames lie on the same strand."""
        return self.master_frame.strand is self.slave_frame.strand

    def frame(self, assembly: Assembly) -> Frame:
        return self.master_frame if assembly is Assembly.MASTER else self.slave_frame

    def ctg_id(self, assembly: Assembly) -> int:
        return self.frame(assembly).ctg_id

    def same_contigs(self, other: "Block") -> bool:
        """Check whether two blocks join the same master and slave contigs."""
        return (self.master_ctg_id == other.master_ctg_id
                and self.slave_ctg_id == other.slave_ctg_id)

# StrandMerger v0.1.0
# Any usage is subject to this software's license.
