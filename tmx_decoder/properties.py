"""
Custom properties attached to maps, tilesets, tiles, layers and objects.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Optional

from .errors import PropertyConversionError, PropertyNotFoundError, PropertyTypeError

logger = logging.getLogger(__name__)


@dataclass
class Property:
    """
    Custom property attached to any TMX element.

    ==========================================================================
    SUPPORTED TYPES
    ==========================================================================

    - string: Text value (default)
    - int: Integer number
    - float: Decimal number
    - bool: True/False
    - color, file, object: kept as the raw string

    ==========================================================================
    """
    name: str                    # Property name (key)
    type: str = "string"         # Value type
    value: Any = None            # Converted value (raw string if conversion failed)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Property':
        """
        Parse property from XML element.

        XML format:
            <property name="solid" type="bool" value="true"/>
            <property name="health" type="int" value="100"/>
            <property name="description" value="A wooden door"/>  (type defaults to string)
            <property name="notes">multi-line text</property>
        """
        prop_type = elem.get('type', 'string')
        value = elem.get('value')
        if value is None:
            # Multi-line string properties store their value as element text
            value = elem.text or ''

        try:
            if prop_type == 'int':
                value = int(value)
            elif prop_type == 'float':
                value = float(value)
            elif prop_type == 'bool':
                # XML stores as "true"/"false" strings
                value = value.lower() == 'true'
        except ValueError:
            logger.warning(
                f"Property {elem.get('name')!r}: value {value!r} is not a valid {prop_type}"
            )

        return cls(name=elem.get('name', ''), type=prop_type, value=value)


class Properties(dict):
    """
    Properties of one element, keyed by name.

    The typed getters check the declared type before returning the value:

        props.int('health')    → 100
        props.float('health')  → PropertyTypeError (declared as int)
        props.bool('missing')  → PropertyNotFoundError
    """

    @classmethod
    def from_xml(cls, elem: Optional[ET.Element]) -> 'Properties':
        """Collect <property> children of an element's <properties> block."""
        props = cls()
        if elem is None:
            return props

        props_elem = elem.find('properties')
        if props_elem is not None:
            for prop_elem in props_elem.findall('property'):
                prop = Property.from_xml(prop_elem)
                # First definition wins for duplicated names
                props.setdefault(prop.name, prop)
        return props

    def with_name(self, name: str) -> Optional[Property]:
        return self.get(name)

    def _typed(self, name: str, expected: str, python_type: type) -> Any:
        prop = self.get(name)
        if prop is None:
            raise PropertyNotFoundError(name)
        if prop.type != expected:
            raise PropertyTypeError(name, expected, prop.type)
        # bool is an int subclass; never accept it for 'int'
        if type(prop.value) is not python_type:
            raise PropertyConversionError(name, str(prop.value), expected)
        return prop.value

    def float(self, name: str) -> float:
        return self._typed(name, 'float', float)

    def int(self, name: str) -> int:
        return self._typed(name, 'int', int)

    def bool(self, name: str) -> bool:
        return self._typed(name, 'bool', bool)
