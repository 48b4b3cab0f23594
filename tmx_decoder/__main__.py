#!/usr/bin/env python3

"""
TMX layer decoder - prints a summary of every tile layer in a map

Usage:
    python -m tmx_decoder <map.tmx> [--layer NAME] [--strict] [-v]

For each tile layer: size, encoding, non-empty cells, flipped cells and
the tilesets its tiles come from.

Environment:
    TMX_DECODER_STRICT=1         same as --strict
    TMX_DECODER_LOG_LEVEL=DEBUG  console log level
"""

import argparse
import logging
import sys
import xml.etree.ElementTree as ET
from collections import Counter
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, TextIO

from .errors import TmxError
from .layer import Layer
from .logging_config import setup_logging
from .settings import DecodeSettings
from .tiled_map import TiledMap

logger = logging.getLogger(__name__)


def summarize_layer(layer: Layer, tmx_map: TiledMap, settings: DecodeSettings,
                    out: TextIO) -> None:
    defs = layer.tile_defs(tmx_map.tilesets, settings)

    used = [d for d in defs if not d.nil]
    flipped = sum(1 for d in used
                  if d.flipped_horizontally or d.flipped_vertically or d.flipped_diagonally)
    by_tileset = Counter(d.tileset.name for d in used)

    encoding = layer.data.encoding or 'xml'
    if layer.data.compression:
        encoding = f"{encoding}+{layer.data.compression}"

    out.write(f"{layer.name} ({layer.width}x{layer.height}, {encoding})\n")
    out.write(f"  cells: {len(defs)}, non-empty: {len(used)}, flipped: {flipped}\n")
    for name, count in sorted(by_tileset.items()):
        out.write(f"  tileset {name}: {count}\n")


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    parser = argparse.ArgumentParser(
        prog="tmx_decoder",
        description="Decode and summarize the tile layers of a TMX map.",
    )
    parser.add_argument("map", help="path to the .tmx file")
    parser.add_argument("--layer", help="only summarize the layer with this name")
    parser.add_argument("--strict", action="store_true",
                        help="reject GIDs past a tileset's declared tilecount")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="debug logging")
    args = parser.parse_args(argv)

    settings = DecodeSettings.from_env()
    if args.strict:
        settings = replace(settings, strict_tile_ranges=True)
    if args.verbose:
        settings = replace(settings, log_level="DEBUG")
    setup_logging(settings.log_level)

    source_path = Path(args.map)
    if not source_path.exists():
        logger.error(f"File '{source_path}' not found")
        return 1

    try:
        tmx_map = TiledMap.load(source_path)

        layers = tmx_map.layers
        if args.layer:
            layer = tmx_map.layer_with_name(args.layer)
            if layer is None:
                logger.error(f"No tile layer named {args.layer!r}")
                return 1
            layers = [layer]

        for layer in layers:
            summarize_layer(layer, tmx_map, settings, out)
    except (TmxError, ET.ParseError, ValueError) as e:
        logger.error(f"Decoding failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
