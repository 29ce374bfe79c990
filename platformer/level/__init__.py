"""Level building, collision and tileset rendering"""

from .builder import Collider, Level, LevelBuilder, SpawnPoint, SpawnRegistry, TilePlacement
from .collision import CollisionMap, ONE_WAY, SOLID
from .loader import LevelLoader, LoadedLevel
from .tileset_renderer import TilesetRenderer

__all__ = [
    "Collider", "Level", "LevelBuilder", "SpawnPoint", "SpawnRegistry", "TilePlacement",
    "CollisionMap", "ONE_WAY", "SOLID",
    "LevelLoader", "LoadedLevel",
    "TilesetRenderer",
]
