#!/usr/bin/env python3

"""
Module for reading and writing the subset of the TMX format (Tiled Map
Format) used by the platformer levels.

=============================================================================
WHAT IS SUPPORTED?
=============================================================================

Levels are authored in the Tiled Map Editor and saved as TMX (XML). This
module understands exactly what the levels use:

- Orthogonal maps with a fixed tile size
- Inline tilesets backed by a single image
- Tile properties (flat name/value strings, e.g. type="block")
- Tile layers with CSV-encoded data
- Object groups with axis-aligned objects (spawn points, markers)

Anything else (base64/zlib layer data, external .tsx tilesets, animations,
infinite maps) is rejected or ignored.

=============================================================================
TMX FILE STRUCTURE
=============================================================================

    <map version="1.0" orientation="orthogonal" renderorder="right-down"
         width="20" height="12" tilewidth="16" tileheight="16">

        <tileset firstgid="1" name="terrain" tilewidth="16" tileheight="16">
            <image source="terrain.png" width="128" height="64"/>
            <tile id="0">
                <properties>
                    <property name="type" value="block"/>
                </properties>
            </tile>
        </tileset>

        <layer name="Ground" width="20" height="12">
            <data encoding="csv">
                0,0,1,1,...
            </data>
        </layer>

        <objectgroup name="Spawns">
            <object id="1" type="player 1" x="32" y="160"/>
        </objectgroup>
    </map>

=============================================================================
GLOBAL TILE IDs (GIDs)
=============================================================================

Layer cells reference tiles by Global ID:

    Tileset A (firstgid=1):   tiles 1-32
    Tileset B (firstgid=33):  tiles 33-64

    GID 0  = empty cell
    GID 40 = tile 7 of tileset B (40 - 33 = 7)

The owning tileset of a GID is the one with the highest firstgid that does
not exceed it. Tilesets must appear in ascending firstgid order.

=============================================================================
ERRORS
=============================================================================

Every failure is fatal for the parse in progress, no partial map is ever
returned:

    TmxError
    ├── MalformedDocumentError    XML is not well-formed
    ├── MissingAttributeError     a required attribute is absent
    ├── UnsupportedEncodingError  layer data is not CSV
    ├── MalformedNumberError      an attribute/cell is not a number, or is
    │                             out of range (e.g. tilewidth="0")
    ├── LayerSizeError            layer data does not fit the map
    └── TilesetOrderError         firstgid values are not ascending

=============================================================================
"""

import xml.etree.ElementTree as ET
from typing import Optional, List, Dict, Iterator, Tuple, Union
from dataclasses import dataclass, field
from pathlib import Path
import array


# =============================================================================
# ERRORS
# =============================================================================

class TmxError(Exception):
    """Base class for every error raised while reading a TMX document."""


class MalformedDocumentError(TmxError):
    """The document is not well-formed XML."""


class MissingAttributeError(TmxError):
    """A structurally required attribute is absent."""

    def __init__(self, element: str, attribute: str):
        super().__init__(f"<{element}> is missing required attribute '{attribute}'")
        self.element = element
        self.attribute = attribute


class UnsupportedEncodingError(TmxError):
    """Layer data uses an encoding other than CSV."""

    def __init__(self, encoding: Optional[str]):
        shown = encoding if encoding is not None else "xml (no encoding attribute)"
        super().__init__(f"Unsupported layer encoding '{shown}' - only 'csv' is supported")
        self.encoding = encoding


class MalformedNumberError(TmxError, ValueError):
    """
    An attribute or CSV cell is not a number, or is out of range.

    For CSV cells `attribute` is None and `index` is the cell position in
    the data (row-major).
    """

    def __init__(self, element: str, attribute: Optional[str], value: str,
                 message: Optional[str] = None, index: Optional[int] = None):
        if message is None:
            message = f"<{element}> attribute '{attribute}' is not a valid number: {value!r}"
        super().__init__(message)
        self.element = element
        self.attribute = attribute
        self.value = value
        self.index = index


class LayerSizeError(TmxError):
    """Layer data does not match the declared layer or map size."""


class TilesetOrderError(TmxError):
    """Tileset firstgid values are not strictly increasing."""


# =============================================================================
# ATTRIBUTE HELPERS
# =============================================================================
# ElementTree returns attribute values as strings (or None when absent).
# These helpers convert them and apply the documented defaults. A default of
# _REQUIRED means the attribute must be present.

_REQUIRED = object()


def _require(elem: ET.Element, name: str) -> str:
    value = elem.get(name)
    if value is None:
        raise MissingAttributeError(elem.tag, name)
    return value


def _get_str(elem: ET.Element, name: str, default: str = "") -> str:
    return elem.get(name, default)


def _get_int(elem: ET.Element, name: str, default=_REQUIRED,
             minimum: Optional[int] = None) -> int:
    """
    Read an integer attribute.

    Raises MalformedNumberError on bad input, or when the value is below
    `minimum`.
    """
    if default is _REQUIRED:
        value = _require(elem, name)
    else:
        value = elem.get(name)
        if value is None:
            return default
    try:
        number = int(value)
    except ValueError as e:
        raise MalformedNumberError(elem.tag, name, value) from e

    if minimum is not None and number < minimum:
        raise MalformedNumberError(
            elem.tag, name, value,
            f"<{elem.tag}> attribute '{name}' must be at least {minimum}, got {value!r}"
        )
    return number


def _get_float(elem: ET.Element, name: str, default=_REQUIRED) -> float:
    if default is _REQUIRED:
        value = _require(elem, name)
    else:
        value = elem.get(name)
        if value is None:
            return default
    try:
        return float(value)
    except ValueError as e:
        raise MalformedNumberError(elem.tag, name, value) from e


def _get_visible(elem: ET.Element) -> bool:
    """
    Decode the 'visible' attribute.

    Absent means visible. When present it must be an integer: "0" hides the
    element, any other integer shows it. A string like "true" is rejected as
    a malformed number rather than interpreted.
    """
    return _get_int(elem, 'visible', 1) != 0


def _format_float(value: float) -> str:
    # 1.0 -> "1", 0.1234567 -> "0.1234567" (shortest exact repr)
    text = repr(value)
    return text[:-2] if text.endswith('.0') else text


# =============================================================================
# PROPERTY CLASS
# =============================================================================

@dataclass(frozen=True)
class Property:
    """
    Name/value pair attached to a tile.

    Level tiles use them to drive gameplay:
        type=block      → tile gets a collider
        one_way=true    → collider only blocks from above

    Values are kept as strings, exactly as written in the document.
    """
    name: str
    value: str

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Property':
        """
        Parse property from XML element.

        XML format:
            <property name="type" value="block"/>
        """
        return cls(name=_get_str(elem, 'name'), value=_get_str(elem, 'value'))

    def to_xml(self) -> ET.Element:
        elem = ET.Element('property')
        elem.set('name', self.name)
        elem.set('value', self.value)
        return elem


# =============================================================================
# IMAGE CLASS
# =============================================================================

@dataclass(frozen=True)
class Image:
    """
    Spritesheet image of a tileset.

    source: Path to the image file, relative to the TMX file
    width:  Image width in pixels
    height: Image height in pixels

    Nothing is loaded here, the consumer resolves and loads the file.
    """
    source: str
    width: int
    height: int

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Image':
        """Parse image from XML element."""
        return cls(
            source=_get_str(elem, 'source'),
            width=_get_int(elem, 'width'),
            height=_get_int(elem, 'height')
        )

    def to_xml(self) -> ET.Element:
        elem = ET.Element('image')
        elem.set('source', self.source)
        elem.set('width', str(self.width))
        elem.set('height', str(self.height))
        return elem


# =============================================================================
# TILE CLASS
# =============================================================================

@dataclass(frozen=True)
class Tile:
    """
    Tile metadata within a tileset.

    ==========================================================================
    TILE IDs
    ==========================================================================

    The 'id' is LOCAL to the tileset (0-based index).
    To get the Global ID (GID): gid = tileset.firstgid + tile.id

    ==========================================================================
    PROPERTIES
    ==========================================================================

    Properties are kept in document order. Tiled never writes the same name
    twice, but if a document does, the first one wins on lookup.

    ==========================================================================
    """
    id: int
    properties: List[Property] = field(default_factory=list)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Tile':
        """Parse tile from XML element. Tiles without <properties> are valid."""
        properties = []
        props_elem = elem.find('properties')
        if props_elem is not None:
            for prop_elem in props_elem.findall('property'):
                properties.append(Property.from_xml(prop_elem))

        return cls(id=_get_int(elem, 'id'), properties=properties)

    def to_xml(self) -> ET.Element:
        elem = ET.Element('tile')
        elem.set('id', str(self.id))

        if self.properties:
            props_elem = ET.SubElement(elem, 'properties')
            for prop in self.properties:
                props_elem.append(prop.to_xml())

        return elem

    @property
    def has_properties(self) -> bool:
        return bool(self.properties)

    def get_property_by_name(self, name: str) -> Optional[str]:
        """
        Return the value of the first property called `name`.

        Returns None if the tile has no such property.
        """
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return None


# =============================================================================
# TILESET CLASS
# =============================================================================

@dataclass(frozen=True)
class Tileset:
    """
    Tileset - a contiguous range of GIDs backed by one spritesheet.

    ==========================================================================
    SPACING AND MARGIN
    ==========================================================================

    margin = pixels around the EDGE of the entire image
    spacing = pixels BETWEEN tiles

    +--+===+===+===+--+
    |  | 0 | 1 | 2 |  |  <- margin
    +--+===+===+===+--+
    |  | 3 | 4 | 5 |  |
    +--+===+===+===+--+
         ^
         spacing between tiles

    The number of columns is not stored in the subset we read, it is derived
    from the image width:

        columns = (image.width - 2*margin + spacing) // (tilewidth + spacing)

    ==========================================================================
    TILES
    ==========================================================================

    `tiles` holds every <tile> child in document order. In practice Tiled only
    writes <tile> elements for tiles that carry metadata, so most tiles of
    the spritesheet have no entry here.

    ==========================================================================
    """
    firstgid: int                                    # First Global ID
    name: str                                        # Tileset name
    tilewidth: int                                   # Tile width in pixels
    tileheight: int                                  # Tile height in pixels
    spacing: int = 0                                 # Pixels between tiles
    margin: int = 0                                  # Pixels around edge
    source: Optional[str] = None                     # TSX path (not loaded)
    image: Optional[Image] = None                    # Spritesheet image
    tiles: List[Tile] = field(default_factory=list)  # Tile metadata

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Tileset':
        """Parse tileset from XML element."""
        # Spritesheet image is optional; without it nothing can be drawn
        img_elem = elem.find('image')
        image = Image.from_xml(img_elem) if img_elem is not None else None

        tiles = [Tile.from_xml(tile_elem) for tile_elem in elem.findall('tile')]

        return cls(
            firstgid=_get_int(elem, 'firstgid', minimum=1),
            name=_get_str(elem, 'name'),
            tilewidth=_get_int(elem, 'tilewidth', minimum=1),
            tileheight=_get_int(elem, 'tileheight', minimum=1),
            spacing=_get_int(elem, 'spacing', 0, minimum=0),
            margin=_get_int(elem, 'margin', 0, minimum=0),
            source=elem.get('source'),
            image=image,
            tiles=tiles
        )

    def to_xml(self) -> ET.Element:
        elem = ET.Element('tileset')
        elem.set('firstgid', str(self.firstgid))
        if self.source:
            elem.set('source', self.source)
        elem.set('name', self.name)
        elem.set('tilewidth', str(self.tilewidth))
        elem.set('tileheight', str(self.tileheight))

        # Only include spacing/margin if non-zero
        if self.spacing:
            elem.set('spacing', str(self.spacing))
        if self.margin:
            elem.set('margin', str(self.margin))

        if self.image:
            elem.append(self.image.to_xml())

        for tile in self.tiles:
            elem.append(tile.to_xml())

        return elem

    @property
    def columns(self) -> int:
        """Tiles per row of the spritesheet (0 without an image)."""
        if self.image is None:
            return 0
        usable = self.image.width - 2 * self.margin + self.spacing
        return max(0, usable // (self.tilewidth + self.spacing))

    def contains_gid(self, gid: int) -> bool:
        """True if `gid` falls inside this tileset's image."""
        if self.image is None:
            return False
        rows = (self.image.height - 2 * self.margin + self.spacing) // (self.tileheight + self.spacing)
        return self.firstgid <= gid < self.firstgid + self.columns * rows

    def tile_rect(self, local_id: int) -> Tuple[int, int, int, int]:
        """
        Source rectangle (x, y, width, height) of a tile in the image.

        Parameters:
        -----------
        local_id : int
            Tile index inside the tileset (gid - firstgid)

        Raises:
        -------
        ValueError : If the tileset has no image or local_id is negative
        """
        columns = self.columns
        if columns <= 0:
            raise ValueError(f"Tileset '{self.name}' has no image to slice")
        if local_id < 0:
            raise ValueError(f"Negative tile id {local_id} in tileset '{self.name}'")

        col = local_id % columns
        row = local_id // columns
        x = self.margin + col * (self.tilewidth + self.spacing)
        y = self.margin + row * (self.tileheight + self.spacing)
        return x, y, self.tilewidth, self.tileheight


# =============================================================================
# LAYER CLASS
# =============================================================================

def decode_csv(text: Optional[str], width: int, height: int) -> array.array:
    """
    Decode the body of a CSV <data> element.

    Data looks like "1,2,0,\\n0,3,4" - split on commas, strip each token and
    parse it as an integer. The number of cells must be exactly
    width * height.

    Raises:
    -------
    MalformedNumberError : A token is empty, not an integer, or negative
    LayerSizeError : Wrong number of cells
    """
    gids = array.array('I')
    row_length = max(width, 1)
    for index, token in enumerate((text or '').split(',')):
        token = token.strip()
        try:
            gids.append(int(token))
        except (ValueError, OverflowError) as e:
            raise MalformedNumberError(
                'data', None, token,
                f"<data> cell {index} (column {index % row_length}, row {index // row_length}) "
                f"is not a valid tile GID: {token!r}",
                index=index
            ) from e

    if len(gids) != width * height:
        raise LayerSizeError(
            f"Layer data has {len(gids)} cells, expected {width}x{height} = {width * height}"
        )
    return gids


def encode_csv(gids: array.array, width: int) -> str:
    """Format gids as CSV text, one map row per line."""
    rows = []
    for row_start in range(0, len(gids), width):
        rows.append(','.join(str(gid) for gid in gids[row_start:row_start + width]))
    return '\n' + ',\n'.join(rows) + '\n'


@dataclass(frozen=True)
class Layer:
    """
    Tile layer - a grid of GIDs.

    ==========================================================================
    DATA LAYOUT
    ==========================================================================

    Cells are stored row-major in an array.array('I'):

        index = col + row * width

    GID 0 = empty, anything else references a tileset tile.

    ==========================================================================
    """
    name: str
    width: int
    height: int
    opacity: float = 1.0
    visible: bool = True
    data: array.array = field(default_factory=lambda: array.array('I'))

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Layer':
        """Parse tile layer from XML element."""
        width = _get_int(elem, 'width', minimum=1)
        height = _get_int(elem, 'height', minimum=1)

        data_elem = elem.find('data')
        encoding = data_elem.get('encoding') if data_elem is not None else None
        if encoding != 'csv':
            raise UnsupportedEncodingError(encoding)

        return cls(
            name=_get_str(elem, 'name'),
            width=width,
            height=height,
            opacity=_get_float(elem, 'opacity', 1.0),
            visible=_get_visible(elem),
            data=decode_csv(data_elem.text, width, height)
        )

    def to_xml(self) -> ET.Element:
        elem = ET.Element('layer')
        elem.set('name', self.name)
        elem.set('width', str(self.width))
        elem.set('height', str(self.height))

        if self.opacity != 1.0:
            elem.set('opacity', _format_float(self.opacity))
        if not self.visible:
            elem.set('visible', '0')

        data_elem = ET.SubElement(elem, 'data')
        data_elem.set('encoding', 'csv')
        data_elem.text = encode_csv(self.data, self.width)
        return elem

    def get_tile_gid(self, x: int, y: int) -> int:
        """
        Get the GID of the tile at column x, row y.

        Out of bounds = 0 (empty).
        """
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.data[x + y * self.width]
        return 0

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (col, row, gid) for every non-empty cell, row by row."""
        for index, gid in enumerate(self.data):
            if gid != 0:
                yield index % self.width, index // self.width, gid


# =============================================================================
# MAP OBJECT CLASS
# =============================================================================

@dataclass
class MapObject:
    """
    Object in an object group.

    Levels use objects as spawn points: the 'type' string selects what to
    spawn, x/y give the top-left pixel position.

    Absent id and gid decode to -1. This is the only mutable model class:
    the game may rename an object for display.
    """
    x: int
    y: int
    id: int = -1
    name: str = ""
    type: str = ""
    width: int = 0
    height: int = 0
    rotation: int = 0
    gid: int = -1
    visible: bool = True

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'MapObject':
        """Parse object from XML element."""
        return cls(
            id=_get_int(elem, 'id', -1),
            name=_get_str(elem, 'name'),
            type=_get_str(elem, 'type'),
            x=_get_int(elem, 'x'),
            y=_get_int(elem, 'y'),
            width=_get_int(elem, 'width', 0),
            height=_get_int(elem, 'height', 0),
            rotation=_get_int(elem, 'rotation', 0),
            gid=_get_int(elem, 'gid', -1),
            visible=_get_visible(elem)
        )

    def to_xml(self) -> ET.Element:
        elem = ET.Element('object')
        if self.id != -1:
            elem.set('id', str(self.id))
        if self.name:
            elem.set('name', self.name)
        if self.type:
            elem.set('type', self.type)

        # Position is always included
        elem.set('x', str(self.x))
        elem.set('y', str(self.y))

        if self.width:
            elem.set('width', str(self.width))
        if self.height:
            elem.set('height', str(self.height))
        if self.rotation:
            elem.set('rotation', str(self.rotation))
        if self.gid != -1:
            elem.set('gid', str(self.gid))
        if not self.visible:
            elem.set('visible', '0')
        return elem


# =============================================================================
# OBJECT GROUP CLASS
# =============================================================================

@dataclass(frozen=True)
class ObjectGroup:
    """Object layer - an ordered list of objects."""
    name: str
    color: str = ""
    opacity: float = 1.0
    visible: bool = True
    objects: List[MapObject] = field(default_factory=list)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'ObjectGroup':
        """Parse object group from XML element."""
        return cls(
            name=_get_str(elem, 'name'),
            color=_get_str(elem, 'color'),
            opacity=_get_float(elem, 'opacity', 1.0),
            visible=_get_visible(elem),
            objects=[MapObject.from_xml(obj_elem) for obj_elem in elem.findall('object')]
        )

    def to_xml(self) -> ET.Element:
        elem = ET.Element('objectgroup')
        elem.set('name', self.name)
        if self.color:
            elem.set('color', self.color)
        if self.opacity != 1.0:
            elem.set('opacity', _format_float(self.opacity))
        if not self.visible:
            elem.set('visible', '0')

        for obj in self.objects:
            elem.append(obj.to_xml())
        return elem


# =============================================================================
# TILED MAP CLASS (Main Entry Point)
# =============================================================================

@dataclass(frozen=True)
class TiledMap:
    """
    Complete Tiled map - the root object for TMX files.

    ==========================================================================
    CONSTRUCTION ORDER
    ==========================================================================

    Each step only looks at the immediate children of <map>:

    1. Map attributes
    2. <tileset> children, in document order. Every tile that declares at
       least one property is indexed by its GID in `tiles_by_gid`.
    3. <layer> children
    4. <objectgroup> children

    The whole document is materialized at once; there is no streaming mode.
    A map keeps no reference to the XML tree it was built from.

    ==========================================================================
    USAGE
    ==========================================================================

    Loading:
        level = TiledMap.load("levels/level1.tmx")

    Resolving a cell:
        gid = level.layers[0].get_tile_gid(3, 7)
        tileset = level.get_tileset_for_gid(gid)
        rect = tileset.tile_rect(gid - tileset.firstgid)
        tile = level.get_tile(gid)
        if tile and tile.get_property_by_name("type") == "block":
            ...

    ==========================================================================
    """
    width: int                                       # Map width in tiles
    height: int                                      # Map height in tiles
    tilewidth: int                                   # Tile width in pixels
    tileheight: int                                  # Tile height in pixels
    version: str = ""                                # TMX format version
    orientation: str = "orthogonal"                  # Map orientation
    backgroundcolor: str = ""                        # Background colour
    renderorder: str = ""                            # Render order
    tilesets: List[Tileset] = field(default_factory=list)
    layers: List[Layer] = field(default_factory=list)
    object_groups: List[ObjectGroup] = field(default_factory=list)
    tiles_by_gid: Dict[int, Tile] = field(default_factory=dict)

    @classmethod
    def from_xml(cls, root: ET.Element) -> 'TiledMap':
        """
        Build a map from the <map> root element.

        Raises:
        -------
        TmxError : Any subclass, see module documentation
        """
        # -----------------------------------------------------------------
        # PARSE MAP ATTRIBUTES
        # -----------------------------------------------------------------
        width = _get_int(root, 'width', minimum=1)
        height = _get_int(root, 'height', minimum=1)

        # -----------------------------------------------------------------
        # PARSE TILESETS
        # -----------------------------------------------------------------
        tilesets = []
        tiles_by_gid = {}
        for tileset_elem in root.findall('tileset'):
            tileset = Tileset.from_xml(tileset_elem)
            if tilesets and tileset.firstgid <= tilesets[-1].firstgid:
                raise TilesetOrderError(
                    f"Tileset '{tileset.name}' has firstgid {tileset.firstgid}, "
                    f"not above previous firstgid {tilesets[-1].firstgid}"
                )
            tilesets.append(tileset)

            for tile in tileset.tiles:
                if tile.has_properties:
                    tiles_by_gid[tileset.firstgid + tile.id] = tile

        # -----------------------------------------------------------------
        # PARSE LAYERS
        # -----------------------------------------------------------------
        layers = []
        for layer_elem in root.findall('layer'):
            layer = Layer.from_xml(layer_elem)
            if (layer.width, layer.height) != (width, height):
                raise LayerSizeError(
                    f"Layer '{layer.name}' is {layer.width}x{layer.height}, "
                    f"map is {width}x{height}"
                )
            layers.append(layer)

        # -----------------------------------------------------------------
        # PARSE OBJECT GROUPS
        # -----------------------------------------------------------------
        object_groups = [ObjectGroup.from_xml(group_elem)
                         for group_elem in root.findall('objectgroup')]

        return cls(
            version=_get_str(root, 'version'),
            orientation=_get_str(root, 'orientation', 'orthogonal'),
            width=width,
            height=height,
            tilewidth=_get_int(root, 'tilewidth', minimum=1),
            tileheight=_get_int(root, 'tileheight', minimum=1),
            backgroundcolor=_get_str(root, 'backgroundColor'),
            renderorder=_get_str(root, 'renderorder'),
            tilesets=tilesets,
            layers=layers,
            object_groups=object_groups,
            tiles_by_gid=tiles_by_gid
        )

    @classmethod
    def from_string(cls, text: Union[str, bytes]) -> 'TiledMap':
        """
        Parse a TMX document held in memory.

        Raises:
        -------
        MalformedDocumentError : If the XML is not well-formed
        TmxError : Any other parse failure
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MalformedDocumentError(f"TMX document is not well-formed XML: {e}") from e
        return cls.from_xml(root)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'TiledMap':
        """
        Load a TMX file from disk.

        Raises:
        -------
        FileNotFoundError : If TMX file doesn't exist
        TmxError : If the document cannot be parsed
        """
        return cls.from_string(Path(filepath).read_bytes())

    # =========================================================================
    # WRITING
    # =========================================================================

    def to_xml(self) -> ET.Element:
        root = ET.Element('map')
        if self.version:
            root.set('version', self.version)
        if self.orientation:
            root.set('orientation', self.orientation)
        if self.renderorder:
            root.set('renderorder', self.renderorder)
        root.set('width', str(self.width))
        root.set('height', str(self.height))
        root.set('tilewidth', str(self.tilewidth))
        root.set('tileheight', str(self.tileheight))
        if self.backgroundcolor:
            root.set('backgroundColor', self.backgroundcolor)

        for tileset in self.tilesets:
            root.append(tileset.to_xml())
        for layer in self.layers:
            root.append(layer.to_xml())
        for group in self.object_groups:
            root.append(group.to_xml())

        self._indent(root)
        return root

    def to_string(self) -> str:
        """Serialize the map as a TMX document (CSV layer data)."""
        body = ET.tostring(self.to_xml(), encoding='unicode')
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + '\n'

    def save(self, filepath: Union[str, Path]):
        """Write the map to a TMX file."""
        Path(filepath).write_text(self.to_string(), encoding='utf-8')

    @staticmethod
    def _indent(elem, level=0):
        """
        Add indentation to XML for readable output.

        Element text that already carries content (CSV data) is left alone.
        """
        indent = "\n" + "  " * level

        if len(elem):
            if not elem.text or not elem.text.strip():
                elem.text = indent + "  "
            for child in elem:
                TiledMap._indent(child, level + 1)
            if not child.tail or not child.tail.strip():
                child.tail = indent
        if level and (not elem.tail or not elem.tail.strip()):
            elem.tail = indent

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def pixel_width(self) -> int:
        return self.width * self.tilewidth

    @property
    def pixel_height(self) -> int:
        return self.height * self.tileheight

    def tileset_index(self, gid: int) -> Optional[int]:
        """
        Find the index of the tileset that owns a GID.

        A GID belongs to the tileset with the largest firstgid <= gid.
        Tilesets are kept in ascending firstgid order, so we walk them
        backwards and stop at the first match.

        Returns:
        --------
        int or None : Index into `tilesets`, None if gid is below every
                      tileset's firstgid (or there are no tilesets)
        """
        for i in range(len(self.tilesets) - 1, -1, -1):
            if gid >= self.tilesets[i].firstgid:
                return i
        return None

    def get_tileset_for_gid(self, gid: int) -> Optional[Tileset]:
        index = self.tileset_index(gid)
        return self.tilesets[index] if index is not None else None

    def get_tile(self, gid: int) -> Optional[Tile]:
        """Tile metadata for a GID, if that tile declared properties."""
        return self.tiles_by_gid.get(gid)

    def get_layer_by_name(self, name: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def get_object_group_by_name(self, name: str) -> Optional[ObjectGroup]:
        for group in self.object_groups:
            if group.name == name:
                return group
        return None
