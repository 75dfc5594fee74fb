"""Quadrants of an extended data square, requested one by one during retrieval."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence

from .plugin import Cid, cid_from_namespaced_sha256

# There are always 4 quadrants.
NUM_QUADRANTS = 4
# Time with which new blocks are produced in the network, in seconds.
BLOCK_TIME = 60.0
# Seconds to wait before starting to retrieve another quadrant: the whole
# square must be retrieved within block time, and there are 4 quadrants from
# two sources (rows and columns).
RETRIEVE_QUADRANT_TIMEOUT = BLOCK_TIME / NUM_QUADRANTS * 2

ROW_SOURCE = 0
COL_SOURCE = 1


@dataclass
class Quadrant:
    """A quarter of a square, reached through half of the row or column roots.

    ``x`` and ``y`` are the quadrant coordinates; ``source`` is 0 for rows
    and 1 for columns.
    """

    roots: list[Cid] = field(repr=False)
    x: int
    y: int
    source: int

    def index(self, root_idx: int, cell_idx: int) -> int:
        """Index of a share in the square flattened by rows.

        ``root_idx`` selects one of the quadrant's roots and ``cell_idx`` the
        share within that root's half of the axis.
        """
        size = len(self.roots)
        half_offset_col = (size * 2) ** self.source
        half_offset_row = (size * 2) ** (self.source ^ 1)
        offset_x = self.x * half_offset_col * size
        offset_y = self.y * half_offset_row * size
        return root_idx * half_offset_row + cell_idx * half_offset_col + offset_x + offset_y


def new_quadrants(
    row_roots: Sequence[bytes],
    column_roots: Sequence[bytes],
    rng: random.Random | None = None,
) -> list[Quadrant]:
    """Build the 4 quadrants of each source, 8 in total, in random order."""
    quadrants: list[Quadrant] = []
    for source, da_roots in enumerate((row_roots, column_roots)):
        roots = [cid_from_namespaced_sha256(root) for root in da_roots]
        qsize = len(roots) // 2
        for i in range(NUM_QUADRANTS):
            x, y = i % 2, i // 2
            if source == COL_SOURCE:
                x, y = y, x
            quadrants.append(
                Quadrant(roots=roots[qsize * y : qsize * (y + 1)], x=x, y=y, source=source)
            )
    (rng or random).shuffle(quadrants)
    return quadrants