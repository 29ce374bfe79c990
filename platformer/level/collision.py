"""
Collision grid using a numpy array

=============================================================================
TILE-BASED COLLISION
=============================================================================

Instead of one collider object per tile, collision is stored in a 2D grid
that mirrors the map:

    CollisionMap.data[row, col] = flags

Looking up a cell is O(1), and a body only ever needs to test the handful of
cells its bounding box overlaps.

=============================================================================
FLAGS
=============================================================================

Each cell is a uint8 bit set:

    Bit 0: SOLID    (blocks movement)
    Bit 1: ONE_WAY  (only blocks bodies falling onto it from above)

A one-way cell always has SOLID set as well, so `is_solid` alone answers
"is there a collider here".

=============================================================================
OUT OF BOUNDS
=============================================================================

Left, right and above the map count as solid so bodies cannot leave the
level sideways. Below the map is empty: falling out is how a body dies.

=============================================================================
"""

import numpy as np
from typing import Iterable, Tuple

SOLID = 1
ONE_WAY = 2


class CollisionMap:
    """Collision flags for every tile cell of a level"""

    def __init__(self, width: int, height: int, tile_width: int, tile_height: int):
        """
        Parameters:
        -----------
        width, height : int
            Map size in tiles
        tile_width, tile_height : int
            Tile size in pixels
        """
        self.width = width
        self.height = height
        self.tile_width = tile_width
        self.tile_height = tile_height

        # Shape [rows, cols]; zeros = empty
        self.data = np.zeros((height, width), dtype=np.uint8)

    @classmethod
    def from_placements(cls, width: int, height: int, tile_width: int, tile_height: int,
                        placements: Iterable) -> 'CollisionMap':
        """
        Build the grid from TilePlacement records.

        Several layers may place a collider on the same cell; flags are OR-ed
        together.
        """
        collision = cls(width, height, tile_width, tile_height)
        for placement in placements:
            if placement.collider is None:
                continue
            flags = SOLID
            if placement.collider.one_way:
                flags |= ONE_WAY
            collision.add_flags(placement.col, placement.row, flags)
        return collision

    def _in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.width and 0 <= row < self.height

    def set_flags(self, col: int, row: int, flags: int):
        """Set flags of a cell. Out-of-bounds cells are ignored."""
        if self._in_bounds(col, row):
            self.data[row, col] = flags

    def add_flags(self, col: int, row: int, flags: int):
        if self._in_bounds(col, row):
            self.data[row, col] |= flags

    def get_flags(self, col: int, row: int) -> int:
        if self._in_bounds(col, row):
            return int(self.data[row, col])
        if row >= self.height and 0 <= col < self.width:
            return 0
        return SOLID

    def is_solid(self, col: int, row: int) -> bool:
        return bool(self.get_flags(col, row) & SOLID)

    def is_one_way(self, col: int, row: int) -> bool:
        return bool(self.get_flags(col, row) & ONE_WAY)

    def pixel_to_tile(self, px: float, py: float) -> Tuple[int, int]:
        """
        Convert pixel coordinates to (col, row).

        Uses floor division so -1 px maps to tile -1, not 0.
        """
        return int(px // self.tile_width), int(py // self.tile_height)

    @property
    def solid_count(self) -> int:
        return int(np.count_nonzero(self.data & SOLID))
