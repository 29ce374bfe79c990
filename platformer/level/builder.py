"""
Level building - turns a parsed TiledMap into game-ready records

=============================================================================
WHAT THE BUILDER PRODUCES
=============================================================================

    TiledMap ──> [LevelBuilder] ──> Level
                                     ├── placements  (one per non-empty cell)
                                     ├── spawns      (one per object)
                                     └── collision   (CollisionMap grid)

A TilePlacement records everything the renderer and the physics need for a
single cell: where it goes in the world, which rectangle of which tileset
image it shows, and whether it has a collider.

=============================================================================
TILE PROPERTIES
=============================================================================

Tiles drive colliders through two properties set in Tiled:

    type = "block"    → the tile is solid
    one_way = "true"  → ...but only from above (platforms you can jump
                        through from below)

=============================================================================
WORLD COORDINATES
=============================================================================

Y points down and (0, 0) is the top-left corner of the map, the same as
TMX pixel coordinates. A tile at (col, row) has its top-left corner at
(col * tilewidth, row * tileheight).

Spawn points are stored as the CENTER of the cell whose top-left corner is
the object's (x, y).

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from tiled_loader import TiledMap

from .collision import CollisionMap


@dataclass(frozen=True)
class Collider:
    one_way: bool = False


@dataclass(frozen=True)
class TilePlacement:
    """A non-empty layer cell resolved against its tileset"""
    layer: str                                # Layer name
    col: int
    row: int
    gid: int
    tileset_index: int                        # Index into TiledMap.tilesets
    source_rect: Tuple[int, int, int, int]    # (x, y, w, h) in tileset image
    x: int                                    # World position (top-left)
    y: int
    collider: Optional[Collider] = None


@dataclass(frozen=True)
class SpawnPoint:
    type: str
    name: str
    x: float                                  # World position (center)
    y: float


class SpawnRegistry:
    """
    Maps object type strings to factory callables.

    A factory is called as factory(spawn_point, level) and returns whatever
    entity the game uses. Types with no factory are skipped.

    ```python
    registry = SpawnRegistry()
    registry.register("walker", lambda spawn, level: Walker(spawn.x, spawn.y))
    entities = registry.spawn_all(level)
    ```
    """

    def __init__(self):
        self._factories: Dict[str, Callable] = {}

    def register(self, type_name: str, factory: Callable):
        self._factories[type_name] = factory

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._factories

    def spawn(self, spawn_point: SpawnPoint, level: 'Level'):
        """Create the entity for one spawn point, or None for unknown types"""
        factory = self._factories.get(spawn_point.type)
        if factory is None:
            return None
        return factory(spawn_point, level)

    def spawn_all(self, level: 'Level') -> list:
        entities = []
        for spawn_point in level.spawns:
            entity = self.spawn(spawn_point, level)
            if entity is not None:
                entities.append(entity)
        return entities


@dataclass
class Level:
    map: TiledMap
    placements: List[TilePlacement]
    spawns: List[SpawnPoint]
    collision: CollisionMap

    @property
    def pixel_width(self) -> int:
        return self.map.pixel_width

    @property
    def pixel_height(self) -> int:
        return self.map.pixel_height

    def placements_for_layer(self, layer_name: str) -> List[TilePlacement]:
        return [p for p in self.placements if p.layer == layer_name]


class LevelBuilder:
    """Builds a Level out of a TiledMap"""

    def build(self, tmx_map: TiledMap) -> Level:
        placements = []
        for layer in tmx_map.layers:
            for col, row, gid in layer.cells():
                placements.append(self._place_tile(tmx_map, layer.name, col, row, gid))

        spawns = self._collect_spawns(tmx_map)

        collision = CollisionMap.from_placements(
            tmx_map.width, tmx_map.height,
            tmx_map.tilewidth, tmx_map.tileheight,
            placements
        )
        return Level(map=tmx_map, placements=placements, spawns=spawns, collision=collision)

    def _place_tile(self, tmx_map: TiledMap, layer_name: str,
                    col: int, row: int, gid: int) -> TilePlacement:
        """
        Resolve one cell.

        Raises:
        -------
        ValueError : If no tileset owns the gid, or it has no image
        """
        tileset_index = tmx_map.tileset_index(gid)
        if tileset_index is None:
            raise ValueError(f"Layer '{layer_name}' cell ({col}, {row}) uses gid {gid} "
                             f"which belongs to no tileset")
        tileset = tmx_map.tilesets[tileset_index]
        source_rect = tileset.tile_rect(gid - tileset.firstgid)

        return TilePlacement(
            layer=layer_name,
            col=col,
            row=row,
            gid=gid,
            tileset_index=tileset_index,
            source_rect=source_rect,
            x=col * tmx_map.tilewidth,
            y=row * tmx_map.tileheight,
            collider=self._collider_for(tmx_map, gid)
        )

    @staticmethod
    def _collider_for(tmx_map: TiledMap, gid: int) -> Optional[Collider]:
        tile = tmx_map.get_tile(gid)
        if tile is None or tile.get_property_by_name("type") != "block":
            return None
        return Collider(one_way=tile.get_property_by_name("one_way") == "true")

    @staticmethod
    def _collect_spawns(tmx_map: TiledMap) -> List[SpawnPoint]:
        half_w = tmx_map.tilewidth / 2
        half_h = tmx_map.tileheight / 2
        spawns = []
        for group in tmx_map.object_groups:
            for obj in group.objects:
                spawns.append(SpawnPoint(
                    type=obj.type,
                    name=obj.name,
                    x=obj.x + half_w,
                    y=obj.y + half_h
                ))
        return spawns
