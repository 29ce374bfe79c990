"""
Platformer - two-player platformer prototype built on Tiled (TMX) levels

Requirements:
    pip install pygame numpy pillow
"""

from .camera import Camera
from .config import GameConfig, PlayerControls
from .entities import Body, Player, Walker, default_registry
from .level import (
    Collider, CollisionMap, Level, LevelBuilder, LevelLoader, LoadedLevel,
    SpawnPoint, SpawnRegistry, TilePlacement, TilesetRenderer,
)

__version__ = "1.0.0"
__all__ = [
    "Camera",
    "GameConfig",
    "PlayerControls",
    "Body",
    "Player",
    "Walker",
    "default_registry",
    "Collider",
    "CollisionMap",
    "Level",
    "LevelBuilder",
    "LevelLoader",
    "LoadedLevel",
    "SpawnPoint",
    "SpawnRegistry",
    "TilePlacement",
    "TilesetRenderer",
]
