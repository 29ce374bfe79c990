"""
Level loading

Reads level<N>.tmx from the levels directory and turns it into a Level plus
the images needed to draw it. Parse errors (TmxError) and missing files
(FileNotFoundError) are not caught here: a level that fails to load is a
fatal error for whoever asked for it.
"""

from dataclasses import dataclass
from pathlib import Path

from tiled_loader import TiledMap

from ..config import GameConfig
from .builder import Level, LevelBuilder
from .tileset_renderer import TilesetRenderer


@dataclass
class LoadedLevel:
    number: int
    path: Path
    level: Level
    renderer: TilesetRenderer


class LevelLoader:
    """Loads numbered levels from GameConfig.levels_dir"""

    def __init__(self, config: GameConfig):
        self.config = config
        self.builder = LevelBuilder()

    def level_exists(self, number: int) -> bool:
        return number >= 1 and self.config.level_path(number).is_file()

    def load_level(self, number: int) -> LoadedLevel:
        path = self.config.level_path(number)
        print(f"\nLoading level {number}: {path}")

        tmx_map = TiledMap.from_string(path.read_bytes())
        level = self.builder.build(tmx_map)
        renderer = TilesetRenderer(tmx_map, path)

        print(f"  Map size: {tmx_map.width}x{tmx_map.height} "
              f"({tmx_map.tilewidth}x{tmx_map.tileheight}px tiles)")
        print(f"  Tiles: {len(level.placements)}, solid cells: {level.collision.solid_count}, "
              f"spawns: {len(level.spawns)}")

        return LoadedLevel(number=number, path=path, level=level, renderer=renderer)
