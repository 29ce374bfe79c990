"""
Game configuration

All tunables live here as dataclass defaults. The command line only picks
the levels directory and the starting level (see __main__.py); everything
else is changed by constructing a GameConfig with different values.

Units:
- Distances are world pixels (1 world pixel = 1 TMX pixel)
- Speeds are pixels per second
- Gravity is pixels per second squared (Y points down)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

import pygame


@dataclass
class PlayerControls:
    """Key bindings for one player (pygame key constants)"""
    left: int = pygame.K_LEFT
    right: int = pygame.K_RIGHT
    jump: int = pygame.K_UP


PLAYER_1_CONTROLS = PlayerControls()
PLAYER_2_CONTROLS = PlayerControls(left=pygame.K_a, right=pygame.K_d, jump=pygame.K_w)


@dataclass
class GameConfig:
    # Window
    screen_width: int = 960
    screen_height: int = 540
    fps: int = 60
    # Physics runs at a fixed step regardless of frame rate
    physics_step: float = 1.0 / 120.0
    background_color: Tuple[int, int, int] = (92, 148, 252)

    # Levels
    levels_dir: Path = Path("levels")
    level_filename: str = "level{number}.tmx"
    starting_level: int = 1

    # Physics
    gravity: float = 450.0
    max_fall_speed: float = 480.0

    # Player
    horizontal_speed: float = 120.0
    jump_speed: float = 180.0
    player_size: Tuple[int, int] = (12, 14)
    player_controls: Tuple[PlayerControls, ...] = field(
        default_factory=lambda: (PLAYER_1_CONTROLS, PLAYER_2_CONTROLS)
    )

    # Walker enemy
    walker_speed: float = 40.0
    walker_size: Tuple[int, int] = (14, 12)

    def level_path(self, number: int) -> Path:
        """Path of the TMX file for level `number`"""
        return Path(self.levels_dir) / self.level_filename.format(number=number)
