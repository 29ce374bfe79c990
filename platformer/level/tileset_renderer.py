"""
Tileset loading and layer composition (uses PIL)

=============================================================================
WHAT THIS DOES
=============================================================================

The TMX model only reports image paths and tile rectangles. This module
does the actual image work:

1. Load each tileset's spritesheet, relative to the .tmx file
2. Crop individual tiles out of it (Tileset.tile_rect handles margin and
   spacing)
3. Compose whole layers into one RGBA image each

Layers never change at runtime, so the game draws one pre-composed image
per layer instead of hundreds of tiles per frame.

=============================================================================
MISSING IMAGES
=============================================================================

A tileset whose image cannot be loaded does not stop the level from
loading. It is replaced by a grey placeholder of the declared size, and a
warning is printed. Colliders and spawns do not depend on images, so the
level stays playable.

=============================================================================
"""

from PIL import Image
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from tiled_loader import Layer, TiledMap, Tileset

PLACEHOLDER_COLOR = (128, 128, 128, 255)


def parse_color(value: str) -> Optional[Tuple[int, int, int, int]]:
    """
    Parse a Tiled colour string into an RGBA tuple.

    Tiled writes "#rrggbb" or "#aarrggbb". Returns None for an empty string.

    Raises:
    -------
    ValueError : If the string is not a valid colour
    """
    if not value:
        return None
    digits = value.lstrip('#')
    if len(digits) == 6:
        digits = 'ff' + digits
    if len(digits) != 8:
        raise ValueError(f"Invalid colour: {value!r}")
    a, r, g, b = (int(digits[i:i + 2], 16) for i in range(0, 8, 2))
    return r, g, b, a


class TilesetRenderer:
    """
    Loads tileset images and composes layer images.

    ==========================================================================
    CACHES
    ==========================================================================

    tileset_images: tileset index → full spritesheet (RGBA) or None
    tile_cache:     GID → cropped tile image

    ==========================================================================
    """

    def __init__(self, tmx_map: TiledMap, tmx_path):
        """
        Parameters:
        -----------
        tmx_map : TiledMap
            Parsed map
        tmx_path : str or Path
            Path of the .tmx file, image paths are resolved relative to
            its directory
        """
        self.tmx_map = tmx_map
        self.base_path = Path(tmx_path).parent
        self.tileset_images: List[Optional[Image.Image]] = []
        self.tile_cache: Dict[int, Image.Image] = {}
        self._load_tilesets()

    def _load_tilesets(self):
        for tileset in self.tmx_map.tilesets:
            self.tileset_images.append(self._load_tileset_image(tileset))

    def _load_tileset_image(self, tileset: Tileset) -> Optional[Image.Image]:
        if tileset.image is None:
            print(f"Warning: Tileset '{tileset.name}' has no image")
            return None

        image_path = self.base_path / tileset.image.source
        try:
            image = Image.open(image_path).convert('RGBA')
            print(f"Loaded tileset: {tileset.name} ({image.width}x{image.height})")
            return image
        except OSError as e:
            # FileNotFoundError and PIL.UnidentifiedImageError are both OSError
            print(f"Warning: Could not load tileset image {image_path}: {e}")
            return Image.new('RGBA', (tileset.image.width, tileset.image.height),
                             PLACEHOLDER_COLOR)

    def get_tile_image(self, gid: int) -> Optional[Image.Image]:
        """
        Cropped image of a tile, or None for GID 0 and unresolvable GIDs.
        """
        if gid == 0:
            return None
        if gid in self.tile_cache:
            return self.tile_cache[gid]

        index = self.tmx_map.tileset_index(gid)
        if index is None or self.tileset_images[index] is None:
            return None

        tileset = self.tmx_map.tilesets[index]
        x, y, w, h = tileset.tile_rect(gid - tileset.firstgid)
        tile_image = self.tileset_images[index].crop((x, y, x + w, y + h))
        self.tile_cache[gid] = tile_image
        return tile_image

    def render_layer(self, layer: Layer) -> Image.Image:
        """
        Compose one layer into a map-sized RGBA image.

        The layer's opacity is applied to the alpha channel. Visibility is
        ignored here, see render_map.
        """
        tw = self.tmx_map.tilewidth
        th = self.tmx_map.tileheight
        canvas = Image.new('RGBA', (self.tmx_map.pixel_width, self.tmx_map.pixel_height),
                           (0, 0, 0, 0))

        for col, row, gid in layer.cells():
            tile_image = self.get_tile_image(gid)
            if tile_image is None:
                continue
            # Tiles are anchored at the bottom-left of their cell
            dest_y = (row + 1) * th - tile_image.height
            if dest_y < 0:
                # Taller than the rows above it; clip the part above the map
                tile_image = tile_image.crop((0, -dest_y, tile_image.width, tile_image.height))
                dest_y = 0
            canvas.alpha_composite(tile_image, (col * tw, dest_y))

        if layer.opacity < 1.0:
            alpha = canvas.getchannel('A').point(lambda a: int(a * layer.opacity))
            canvas.putalpha(alpha)
        return canvas

    def render_map(self, include_hidden: bool = False) -> Image.Image:
        """
        Compose every visible layer, bottom to top, over the map's
        background colour (transparent if the map has none).
        """
        background = parse_color(self.tmx_map.backgroundcolor) or (0, 0, 0, 0)
        canvas = Image.new('RGBA', (self.tmx_map.pixel_width, self.tmx_map.pixel_height),
                           background)
        for layer in self.tmx_map.layers:
            if layer.visible or include_hidden:
                canvas.alpha_composite(self.render_layer(layer))
        return canvas
