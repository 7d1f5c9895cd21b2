"""Packs a ZXY directory of map tiles (Z/X/Y.ext) into a single MBTiles
archive"""

__version__ = "0.1.0"

from .archive import MBTilesWriter, resolve_name
from .exceptions import (FormatMismatchError, NoUsableTilesError,
                         TargetExistsError, TileArchiveError, TilePathError,
                         UnsupportedFormatError)
from .formats import FormatGuard, TileFormat
from .tiles import (Scheme, TileCoordinate, TileRecord, ZoomRange,
                    parse_tile_path, translate_row)
from .zxy_to_mbtiles import IngestSummary, MBTilesConstructor

__all__ = [
    "MBTilesConstructor",
    "IngestSummary",
    "MBTilesWriter",
    "resolve_name",
    "FormatGuard",
    "TileFormat",
    "Scheme",
    "TileCoordinate",
    "TileRecord",
    "ZoomRange",
    "parse_tile_path",
    "translate_row",
    "TileArchiveError",
    "TargetExistsError",
    "FormatMismatchError",
    "NoUsableTilesError",
    "TilePathError",
    "UnsupportedFormatError",
]
