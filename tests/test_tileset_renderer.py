"""Tests for tileset image loading and layer composition."""

import tempfile
import unittest
from pathlib import Path

import pytest
from PIL import Image

from platformer.level.tileset_renderer import PLACEHOLDER_COLOR, TilesetRenderer, parse_color
from tiled_loader import TiledMap

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)

LEVEL = """<?xml version="1.0" encoding="UTF-8"?>
<map width="2" height="1" tilewidth="16" tileheight="16" backgroundColor="#00ff00">
 <tileset firstgid="1" name="colours" tilewidth="16" tileheight="16">
  <image source="colours.png" width="32" height="16"/>
 </tileset>
 <layer name="Back" width="2" height="1"><data encoding="csv">0,1</data></layer>
 <layer name="Hidden" width="2" height="1" visible="0"><data encoding="csv">2,2</data></layer>
 <layer name="Faded" width="2" height="1" opacity="0.5"><data encoding="csv">2,0</data></layer>
</map>
"""


class TestTilesetRenderer(unittest.TestCase):
    """Test rendering against a two-tile spritesheet (red, blue)."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base = Path(self.temp_dir.name)

        sheet = Image.new('RGBA', (32, 16), RED)
        sheet.paste(Image.new('RGBA', (16, 16), BLUE), (16, 0))
        sheet.save(self.base / "colours.png")

        self.tmx_path = self.base / "level.tmx"
        self.tmx_path.write_text(LEVEL, encoding="utf-8")
        self.tmx_map = TiledMap.load(self.tmx_path)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_tileset_image_is_loaded_relative_to_map(self) -> None:
        """Test that tileset images are loaded relative to the map file."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)

        assert len(renderer.tileset_images) == 1
        assert renderer.tileset_images[0].size == (32, 16)
        assert renderer.tileset_images[0].mode == 'RGBA'

    def test_get_tile_image(self) -> None:
        """Test cropping single tiles out of the sheet."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)

        red = renderer.get_tile_image(1)
        blue = renderer.get_tile_image(2)

        assert red.size == (16, 16)
        assert red.getpixel((8, 8)) == RED
        assert blue.getpixel((8, 8)) == BLUE
        assert renderer.get_tile_image(0) is None

    def test_tiles_are_cached(self) -> None:
        """Test that cropped tiles are cached by gid."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)

        first = renderer.get_tile_image(2)
        assert renderer.tile_cache[2] is first
        assert renderer.get_tile_image(2) is first

    def test_render_layer(self) -> None:
        """Test composing a layer into one image."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)
        image = renderer.render_layer(self.tmx_map.get_layer_by_name("Hidden"))

        assert image.size == (32, 16)
        assert image.getpixel((4, 4)) == BLUE
        assert image.getpixel((20, 4)) == BLUE

    def test_empty_cells_are_transparent(self) -> None:
        """Test that empty cells stay transparent."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)
        image = renderer.render_layer(self.tmx_map.get_layer_by_name("Back"))

        assert image.getpixel((4, 4))[3] == 0
        assert image.getpixel((20, 4)) == RED

    def test_layer_opacity_scales_alpha(self) -> None:
        """Test that layer opacity scales the alpha channel."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)
        image = renderer.render_layer(self.tmx_map.get_layer_by_name("Faded"))

        assert image.getpixel((4, 4)) == (0, 0, 255, 127)

    def test_render_map_skips_hidden_layers(self) -> None:
        """Test that render_map skips hidden layers."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)
        image = renderer.render_map()

        # Left cell: background under a half transparent blue tile
        r, g, b, a = image.getpixel((4, 4))
        assert a == 255
        assert 0 < g < 255 and 0 < b < 255 and r == 0
        # Right cell: red tile, the hidden blue layer is not drawn
        assert image.getpixel((20, 4)) == RED

    def test_render_map_with_hidden_layers(self) -> None:
        """Test render_map with include_hidden."""
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)
        image = renderer.render_map(include_hidden=True)

        assert image.getpixel((20, 4)) == BLUE

    def test_missing_image_uses_placeholder(self) -> None:
        """Test that a missing image is replaced by a placeholder."""
        (self.base / "colours.png").unlink()
        renderer = TilesetRenderer(self.tmx_map, self.tmx_path)

        assert renderer.tileset_images[0].size == (32, 16)
        assert renderer.get_tile_image(1).getpixel((0, 0)) == PLACEHOLDER_COLOR

    def test_tileset_without_image(self) -> None:
        """Test a tileset that has no image."""
        tmx_map = TiledMap.from_string(
            '<map width="1" height="1" tilewidth="16" tileheight="16">'
            '<tileset firstgid="1" name="bare" tilewidth="16" tileheight="16"/>'
            '</map>'
        )
        renderer = TilesetRenderer(tmx_map, self.tmx_path)

        assert renderer.tileset_images == [None]
        assert renderer.get_tile_image(1) is None


class TestParseColor(unittest.TestCase):
    """Test Tiled colour strings."""

    def test_rgb(self) -> None:
        """Test #rrggbb colours."""
        assert parse_color("#ff0000") == (255, 0, 0, 255)
        assert parse_color("5c94fc") == (0x5c, 0x94, 0xfc, 255)

    def test_argb(self) -> None:
        """Test #aarrggbb colours."""
        assert parse_color("#80ff0000") == (255, 0, 0, 128)

    def test_empty(self) -> None:
        """Test that an empty string means no colour."""
        assert parse_color("") is None

    def test_invalid(self) -> None:
        """Test that invalid colours are rejected."""
        with pytest.raises(ValueError):
            parse_color("#abc")
        with pytest.raises(ValueError):
            parse_color("#zzzzzz")
