"""Game entities and the spawn table that creates them from level objects"""

from ..config import GameConfig
from ..level.builder import SpawnRegistry
from .body import Body
from .player import Player
from .walker import Walker


def default_registry(config: GameConfig) -> SpawnRegistry:
    """
    Spawn table for the object types used in the levels:

        "player 1" → Player with player 1 controls
        "player 2" → Player with player 2 controls
        "walker"   → Walker
    """
    registry = SpawnRegistry()
    for number, controls in enumerate(config.player_controls, start=1):
        name = f"player {number}"
        registry.register(
            name,
            lambda spawn, level, controls=controls, name=name: Player(
                spawn.x, spawn.y, config, controls, name=name)
        )
    registry.register("walker", lambda spawn, level: Walker(spawn.x, spawn.y, config))
    return registry


__all__ = ["Body", "Player", "Walker", "default_registry"]
