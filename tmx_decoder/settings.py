"""
Decoder settings.

Defaults match what Tiled itself accepts. Settings can also be read from
the environment, which is what the command line tool does:

    TMX_DECODER_STRICT=1         reject GIDs past a tileset's tilecount
    TMX_DECODER_LOG_LEVEL=DEBUG  console log level
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_STRICT = "TMX_DECODER_STRICT"
ENV_LOG_LEVEL = "TMX_DECODER_LOG_LEVEL"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class DecodeSettings:
    """
    Options for resolving tiles to tilesets.

    strict_tile_ranges:
        When False (default), a GID belongs to the tileset with the largest
        firstgid <= bare id, even when it runs past that tileset's declared
        tilecount. When True, such GIDs raise NoSuitableTileSetError.
        Tilesets that declare no tilecount are never range checked.
    log_level:
        Console log level used by the command line tool.
    """
    strict_tile_ranges: bool = False
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"invalid log level {self.log_level!r}, "
                f"expected one of {', '.join(VALID_LOG_LEVELS)}"
            )
        object.__setattr__(self, 'log_level', self.log_level.upper())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DecodeSettings':
        """Build settings from TMX_DECODER_* environment variables."""
        if environ is None:
            environ = os.environ

        strict = _parse_bool(environ.get(ENV_STRICT, ""))
        level = environ.get(ENV_LOG_LEVEL, "WARNING")
        if level.upper() not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level in {ENV_LOG_LEVEL}: {level}, using WARNING")
            level = "WARNING"

        return cls(strict_tile_ranges=strict, log_level=level)


DEFAULT_SETTINGS = DecodeSettings()
