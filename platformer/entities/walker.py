"""
Walker enemy - paces back and forth on its platform

Turns around when it bumps into a wall or when the next step would walk off
a ledge.
"""

from ..config import GameConfig
from ..level.collision import CollisionMap
from .body import Body


class Walker(Body):
    def __init__(self, x: float, y: float, config: GameConfig, direction: int = -1):
        width, height = config.walker_size
        super().__init__(x, y, width, height,
                         gravity=config.gravity, max_fall_speed=config.max_fall_speed)
        self.speed = config.walker_speed
        self.direction = direction

    def update(self, dt: float, collision: CollisionMap):
        self.vx = self.direction * self.speed
        self.step(dt, collision)

        if self.hit_wall or (self.grounded and self._at_ledge(collision)):
            self.direction = -self.direction

    def _at_ledge(self, collision: CollisionMap) -> bool:
        """True if the cell just ahead of the leading foot has no floor"""
        ahead_x = self.right + 1 if self.direction > 0 else self.left - 1
        col, row = collision.pixel_to_tile(ahead_x, self.bottom + 1)
        return not collision.is_solid(col, row)
