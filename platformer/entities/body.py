"""
Physics body - an axis-aligned box moving through the collision grid

=============================================================================
COORDINATES
=============================================================================

(x, y) is the CENTER of the box, in world pixels, Y down. Spawn points are
cell centers, so a body spawned there sits inside its cell.

=============================================================================
SEPARATE AXIS MOVEMENT
=============================================================================

Each step moves X first, then Y, checking the grid after each:

    Moving diagonally into a wall:
    - X blocked (wall)     → snap against it, vx = 0
    - Y allowed            → keeps falling / sliding along it

Only the leading edge is tested. At the configured speeds and physics step a
body moves a few pixels per step, far less than a tile, so it can never
skip over a cell.

=============================================================================
ONE-WAY PLATFORMS
=============================================================================

ONE_WAY cells never block horizontal or upward movement. They block a
falling body only if its bottom was at or above the cell's top edge before
the step, i.e. it is landing on the platform rather than passing through.

=============================================================================
"""

from typing import Iterator

from ..level.collision import CollisionMap

EPSILON = 1e-6


def _span(start: float, end: float, size: int) -> Iterator[int]:
    """Tile indices covered by the half-open pixel range [start, end)"""
    return iter(range(int(start // size), int((end - EPSILON) // size) + 1))


class Body:
    def __init__(self, x: float, y: float, width: int, height: int,
                 gravity: float = 500.0, max_fall_speed: float = 480.0):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.gravity = gravity
        self.max_fall_speed = max_fall_speed

        self.vx = 0.0
        self.vy = 0.0
        self.grounded = False
        self.hit_wall = False
        self.alive = True

    # =========================================================================
    # BOUNDS
    # =========================================================================

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    def overlaps(self, other: 'Body') -> bool:
        return (self.left < other.right and other.left < self.right and
                self.top < other.bottom and other.top < self.bottom)

    # =========================================================================
    # SIMULATION
    # =========================================================================

    def update(self, dt: float, collision: CollisionMap):
        """Advance one physics step"""
        self.step(dt, collision)

    def step(self, dt: float, collision: CollisionMap):
        self.vy = min(self.vy + self.gravity * dt, self.max_fall_speed)
        self._move_x(self.vx * dt, collision)
        self._move_y(self.vy * dt, collision)

        # Fell out of the bottom of the level
        if self.top > collision.height * collision.tile_height:
            self.alive = False

    def _blocks_sideways(self, collision: CollisionMap, col: int, row: int) -> bool:
        return collision.is_solid(col, row) and not collision.is_one_way(col, row)

    def _move_x(self, dx: float, collision: CollisionMap):
        self.hit_wall = False
        if dx == 0:
            return

        tw = collision.tile_width
        new_x = self.x + dx
        left = new_x - self.width / 2
        right = new_x + self.width / 2
        rows = list(_span(self.top, self.bottom, collision.tile_height))

        if dx > 0:
            col = int((right - EPSILON) // tw)
            if any(self._blocks_sideways(collision, col, row) for row in rows):
                new_x = col * tw - self.width / 2
                self.hit_wall = True
        else:
            col = int(left // tw)
            if any(self._blocks_sideways(collision, col, row) for row in rows):
                new_x = (col + 1) * tw + self.width / 2
                self.hit_wall = True

        if self.hit_wall:
            self.vx = 0.0
        self.x = new_x

    def _move_y(self, dy: float, collision: CollisionMap):
        if dy == 0:
            return

        th = collision.tile_height
        new_y = self.y + dy
        cols = list(_span(self.left, self.right, collision.tile_width))

        if dy > 0:
            row = int((new_y + self.height / 2 - EPSILON) // th)
            row_top = row * th
            old_bottom = self.bottom
            landed = False
            for col in cols:
                if not collision.is_solid(col, row):
                    continue
                if collision.is_one_way(col, row) and old_bottom > row_top + EPSILON:
                    # Already below the platform's top edge: pass through
                    continue
                landed = True
                break
            if landed:
                new_y = row_top - self.height / 2
                self.vy = 0.0
            self.grounded = landed
        else:
            row = int((new_y - self.height / 2) // th)
            if any(self._blocks_sideways(collision, col, row) for col in cols):
                new_y = (row + 1) * th + self.height / 2
                self.vy = 0.0
            self.grounded = False

        self.y = new_y
