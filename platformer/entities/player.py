"""
Player character

Input is sampled once per frame (handle_input) and applied on every physics
step (update):

- Jump: a key-down gives an upward impulse of jump_speed, if standing on
  something. The request is held until the next physics step consumes it.
- Horizontal: velocity is pushed straight to the desired speed, an impulse of
  (desired - current) per step. With both keys held, right wins.
"""

from typing import AbstractSet

from ..config import GameConfig, PlayerControls
from ..level.collision import CollisionMap
from .body import Body


class Player(Body):
    def __init__(self, x: float, y: float, config: GameConfig, controls: PlayerControls,
                 name: str = "player"):
        width, height = config.player_size
        super().__init__(x, y, width, height,
                         gravity=config.gravity, max_fall_speed=config.max_fall_speed)
        self.name = name
        self.controls = controls
        self.horizontal_speed = config.horizontal_speed
        self.jump_speed = config.jump_speed

        self.desired_speed = 0.0
        self.jump_requested = False

    def handle_input(self, held_keys: AbstractSet[int], pressed_keys: AbstractSet[int]):
        """
        Parameters:
        -----------
        held_keys : set of int
            Keys currently down
        pressed_keys : set of int
            Keys that went down this frame
        """
        if self.controls.jump in pressed_keys:
            self.jump_requested = True

        self.desired_speed = 0.0
        if self.controls.left in held_keys:
            self.desired_speed = -self.horizontal_speed
        if self.controls.right in held_keys:
            self.desired_speed = self.horizontal_speed

    def update(self, dt: float, collision: CollisionMap):
        if self.jump_requested:
            if self.grounded:
                self.vy = -self.jump_speed
                self.grounded = False
            self.jump_requested = False

        self.vx += self.desired_speed - self.vx
        self.step(dt, collision)
