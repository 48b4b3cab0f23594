"""Image references used by tilesets, tiles, objects and image layers."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional


@dataclass
class Image:
    """
    Image reference.

    No loading or decoding is attempted; the attributes are kept as found.

    source: Path to image file (relative to TMX/TSX file)
    width:  Image width in pixels (optional)
    height: Image height in pixels (optional)
    trans:  Transparent color in hex (e.g., "ff00ff" for magenta)
    format: Image format for embedded images ("png", ...)
    """
    source: str                          # Path to image file
    width: Optional[int] = None          # Image width (pixels)
    height: Optional[int] = None         # Image height (pixels)
    trans: Optional[str] = None          # Transparent color (#RRGGBB)
    format: Optional[str] = None         # Embedded image format

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Image':
        """Parse image from XML element."""
        return cls(
            source=elem.get('source', ''),
            # Width/height are optional - use None if not present
            width=int(elem.get('width')) if elem.get('width') else None,
            height=int(elem.get('height')) if elem.get('height') else None,
            trans=elem.get('trans'),
            format=elem.get('format'),
        )

    @classmethod
    def from_parent(cls, parent: ET.Element) -> Optional['Image']:
        """Parse the <image> child of an element, if any."""
        img_elem = parent.find('image')
        if img_elem is None:
            return None
        return cls.from_xml(img_elem)
