"""
Object groups, objects and polygon geometry

=============================================================================
OBJECT GROUPS
=============================================================================

Object layers hold free-positioned shapes instead of a tile grid:

    <objectgroup name="enemies">
        <object id="3" name="enemy1" x="32" y="64" width="16" height="16">
            <properties>
                <property name="health" type="int" value="100"/>
            </properties>
        </object>
        <object id="4" name="zone" x="0" y="0">
            <polygon points="0,0 32,0 32,32"/>
        </object>
        <object id="5" name="lake" x="10" y="10" width="50" height="20">
            <ellipse/>
        </object>
    </objectgroup>

Tiles may also carry an object group describing their collision shapes.

=============================================================================
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from .errors import TmxError
from .image import Image
from .properties import Properties


class Point(NamedTuple):
    x: float
    y: float


@dataclass
class Poly:
    """Polygon or polyline, as the raw "x,y x,y ..." point list."""
    raw_points: str = ""

    def points(self) -> List[Point]:
        """
        Parse the point list.

        Raises:
        -------
        TmxError : A point does not have exactly two numeric coordinates
        """
        pts = []
        for raw_point in self.raw_points.split():
            xy = raw_point.split(',')
            if len(xy) != 2:
                raise TmxError(
                    f"unexpected number of coordinates in point: "
                    f"{len(xy)} in {raw_point!r}"
                )
            try:
                pts.append(Point(float(xy[0]), float(xy[1])))
            except ValueError as exc:
                raise TmxError(f"invalid point {raw_point!r}") from exc
        return pts


@dataclass
class MapObject:
    """An individual object: rectangle, point, ellipse, polygon or tile object."""
    id: int = 0
    name: str = ""
    type: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    gid: int = 0                        # Tile objects reference a GID (flags included)
    visible: bool = True
    ellipse: bool = False
    properties: Properties = field(default_factory=Properties)
    polygons: List[Poly] = field(default_factory=list)
    polylines: List[Poly] = field(default_factory=list)
    image: Optional[Image] = None

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'MapObject':
        """Parse object from XML element."""
        return cls(
            id=int(elem.get('id', 0)),
            name=elem.get('name', ''),
            # Tiled 1.9 renamed 'type' to 'class'
            type=elem.get('type', elem.get('class', '')),
            x=float(elem.get('x', 0)),
            y=float(elem.get('y', 0)),
            width=float(elem.get('width', 0)),
            height=float(elem.get('height', 0)),
            rotation=float(elem.get('rotation', 0)),
            gid=int(elem.get('gid', 0)),
            visible=elem.get('visible', '1') == '1',
            ellipse=elem.find('ellipse') is not None,
            properties=Properties.from_xml(elem),
            polygons=[Poly(p.get('points', '')) for p in elem.findall('polygon')],
            polylines=[Poly(p.get('points', '')) for p in elem.findall('polyline')],
            image=Image.from_parent(elem),
        )

    def is_ellipse(self) -> bool:
        return self.ellipse


class Objects(list):
    """List of MapObject with name lookup."""

    def with_name(self, name: str) -> Optional[MapObject]:
        """First object with the given name, or None."""
        for obj in self:
            if obj.name == name:
                return obj
        return None


@dataclass
class ObjectGroup:
    """Object layer (or a tile's collision shapes)."""
    name: str = ""
    color: Optional[str] = None
    x: int = 0
    y: int = 0
    z: int = 0                          # Document order among map layers
    width: int = 0
    height: int = 0
    opacity: float = 1.0
    visible: bool = True
    offsetx: float = 0
    offsety: float = 0
    draworder: str = "topdown"
    properties: Properties = field(default_factory=Properties)
    objects: Objects = field(default_factory=Objects)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'ObjectGroup':
        """Parse object group from XML element."""
        return cls(
            name=elem.get('name', ''),
            color=elem.get('color'),
            x=int(elem.get('x', 0)),
            y=int(elem.get('y', 0)),
            width=int(elem.get('width', 0)),
            height=int(elem.get('height', 0)),
            opacity=float(elem.get('opacity', 1.0)),
            visible=elem.get('visible', '1') == '1',
            offsetx=float(elem.get('offsetx', 0)),
            offsety=float(elem.get('offsety', 0)),
            draworder=elem.get('draworder', 'topdown'),
            properties=Properties.from_xml(elem),
            objects=Objects(MapObject.from_xml(o) for o in elem.findall('object')),
        )


@dataclass
class ImageLayer:
    """Layer consisting of a single image, such as a background."""
    name: str = ""
    x: int = 0
    y: int = 0
    z: int = 0
    offsetx: float = 0
    offsety: float = 0
    opacity: float = 1.0
    visible: bool = True
    properties: Properties = field(default_factory=Properties)
    image: Optional[Image] = None

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'ImageLayer':
        return cls(
            name=elem.get('name', ''),
            x=int(elem.get('x', 0)),
            y=int(elem.get('y', 0)),
            offsetx=float(elem.get('offsetx', 0)),
            offsety=float(elem.get('offsety', 0)),
            opacity=float(elem.get('opacity', 1.0)),
            visible=elem.get('visible', '1') == '1',
            properties=Properties.from_xml(elem),
            image=Image.from_parent(elem),
        )
