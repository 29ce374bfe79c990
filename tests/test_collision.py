"""Tests for the collision grid."""

import unittest

from platformer.level.builder import Collider, TilePlacement
from platformer.level.collision import ONE_WAY, SOLID, CollisionMap


def placement(col: int, row: int, collider=None) -> TilePlacement:
    return TilePlacement(layer="Ground", col=col, row=row, gid=1, tileset_index=0,
                         source_rect=(0, 0, 16, 16), x=col * 16, y=row * 16,
                         collider=collider)


class TestCollisionMap(unittest.TestCase):
    """Test flags, bounds and coordinate conversion."""

    def setUp(self) -> None:
        self.collision = CollisionMap(4, 3, 16, 16)

    def test_starts_empty(self) -> None:
        """Test that a new grid has no colliders."""
        assert self.collision.data.shape == (3, 4)
        assert self.collision.solid_count == 0
        assert not self.collision.is_solid(0, 0)

    def test_set_and_get(self) -> None:
        """Test setting and reading cell flags."""
        self.collision.set_flags(2, 1, SOLID | ONE_WAY)

        assert self.collision.get_flags(2, 1) == SOLID | ONE_WAY
        assert self.collision.is_solid(2, 1)
        assert self.collision.is_one_way(2, 1)
        assert self.collision.data[1, 2] == SOLID | ONE_WAY

    def test_add_flags_combines(self) -> None:
        """Test that add_flags ORs into existing flags."""
        self.collision.add_flags(0, 0, SOLID)
        self.collision.add_flags(0, 0, ONE_WAY)
        assert self.collision.get_flags(0, 0) == SOLID | ONE_WAY

    def test_writes_outside_are_ignored(self) -> None:
        """Test that writes outside the grid are ignored."""
        self.collision.set_flags(-1, 0, SOLID)
        self.collision.add_flags(4, 0, SOLID)
        assert self.collision.solid_count == 0

    def test_sides_and_top_are_solid(self) -> None:
        """Test that cells left, right and above the map are solid."""
        assert self.collision.is_solid(-1, 1)
        assert self.collision.is_solid(4, 1)
        assert self.collision.is_solid(1, -1)
        assert not self.collision.is_one_way(-1, 1)

    def test_below_the_map_is_open(self) -> None:
        """Test that cells below the map are empty."""
        assert self.collision.get_flags(1, 3) == 0
        assert self.collision.get_flags(1, 50) == 0
        # Below and to the side is still wall
        assert self.collision.is_solid(-1, 3)

    def test_pixel_to_tile(self) -> None:
        """Test pixel to tile conversion with floor division."""
        assert self.collision.pixel_to_tile(0, 0) == (0, 0)
        assert self.collision.pixel_to_tile(15.9, 16) == (0, 1)
        assert self.collision.pixel_to_tile(33, 47.5) == (2, 2)
        assert self.collision.pixel_to_tile(-1, -0.5) == (-1, -1)

    def test_from_placements(self) -> None:
        """Test building the grid from tile placements."""
        collision = CollisionMap.from_placements(4, 3, 16, 16, [
            placement(0, 2, Collider()),
            placement(1, 2, Collider(one_way=True)),
            placement(2, 2),
        ])

        assert collision.get_flags(0, 2) == SOLID
        assert collision.get_flags(1, 2) == SOLID | ONE_WAY
        assert collision.get_flags(2, 2) == 0
        assert collision.solid_count == 2

    def test_overlapping_layers_merge(self) -> None:
        """Test that colliders from several layers on one cell merge."""
        collision = CollisionMap.from_placements(4, 3, 16, 16, [
            placement(3, 0, Collider(one_way=True)),
            placement(3, 0, Collider()),
        ])
        assert collision.get_flags(3, 0) == SOLID | ONE_WAY
