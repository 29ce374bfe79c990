#!/usr/bin/env python3

"""
Platformer - two-player platformer prototype with Tiled levels

Usage:
    python -m platformer [levels_dir] [level_number]

    levels_dir    Directory holding level1.tmx, level2.tmx, ... (default: levels)
    level_number  Level to start on (default: 1)

Controls:
    Arrows      - Player 1 (left/right, up = jump)
    A/D/W       - Player 2
    PgUp/PgDn   - Previous/next level
    R           - Restart level
    ESC         - Quit
"""

import sys
from pathlib import Path

from .config import GameConfig


def main():
    config = GameConfig()

    if len(sys.argv) > 3 or any(arg in ("-h", "--help") for arg in sys.argv[1:]):
        print(__doc__)
        sys.exit(1)

    if len(sys.argv) >= 2:
        config.levels_dir = Path(sys.argv[1])
    if len(sys.argv) >= 3:
        try:
            config.starting_level = int(sys.argv[2])
        except ValueError:
            print(f"Error: Level number must be an integer, got '{sys.argv[2]}'")
            sys.exit(1)

    level_path = config.level_path(config.starting_level)
    if not level_path.exists():
        print(f"Error: File '{level_path}' not found")
        sys.exit(1)

    try:
        from .app import PlatformerApp
        app = PlatformerApp(config)
        app.run()
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
