"""Tile coordinates: parsing them from Z/X/Y.ext paths and translating
rows between the XYZ and TMS numbering schemes."""

import os

from enum import Enum
from typing import NamedTuple, Optional, Sequence, Tuple

from .exceptions import TilePathError
from .formats import TileFormat

# Highest zoom level accepted. 2 ** 30 rows still fit an unsigned 32 bit
# row number.
MAX_ZOOM = 30


class Scheme(str, Enum):
    """Row numbering of the source tiles"""

    # Row 0 is the northernmost row, rows are inverted before storage
    XYZ = "xyz"
    # Row 0 is the southernmost row, the MBTiles numbering
    TMS = "tms"


class TileCoordinate(NamedTuple):
    """Zoom level, column and row of a single tile"""

    zoom: int
    column: int
    row: int

    def __str__(self) -> str:
        return f"{self.zoom}/{self.column}/{self.row}"

    def to_scheme(self, scheme: Scheme) -> "TileCoordinate":
        """Return the coordinate with its row numbered the way the
           MBTiles tiles table expects

           Arguments:
           scheme (Scheme): row numbering of this coordinate
        """
        return self._replace(row=translate_row(scheme, self.zoom, self.row))


class TileRecord(NamedTuple):
    """A tile ready for insertion. The coordinate row is already in the
       MBTiles numbering. The tiles table has no per-tile format column,
       so the writer stores only the coordinate and data; format records
       the run format the tile was checked against."""

    coordinate: TileCoordinate
    format: TileFormat
    data: bytes


class ZoomRange:
    """Minimum and maximum zoom levels seen so far. Both bounds stay None
       until the first zoom level is added."""

    def __init__(self) -> None:
        self.min: Optional[int] = None
        self.max: Optional[int] = None

    def add(self, zoom: int) -> None:
        self.min = zoom if self.min is None else min(self.min, zoom)
        self.max = zoom if self.max is None else max(self.max, zoom)

    def __bool__(self) -> bool:
        return self.min is not None

    def __repr__(self) -> str:
        return f"ZoomRange(min={self.min}, max={self.max})"


def translate_row(scheme: Scheme, zoom: int, row: int) -> int:
    """Convert a source row number to the MBTiles (TMS) row number

       Arguments:
       scheme (Scheme): row numbering of the source tile
       zoom (int):      zoom level of the tile
       row (int):       source row number

       Returns the row number to store in the tiles table
    """
    if scheme is Scheme.XYZ:
        return (1 << zoom) - 1 - row
    return row


def _parse_number(segment: str) -> int:
    # int() would also accept signs, whitespace and underscores
    if not (segment.isascii() and segment.isdigit()):
        raise TilePathError(f"not an unsigned integer: {segment!r}")
    return int(segment)


def parse_tile_path(parts: Sequence[str]) -> Tuple[str, TileCoordinate]:
    """Parse the path segments of a tile file below the ZXY root

       Arguments:
       parts (sequence of str): the zoom directory, the column directory
                                and the file name, in that order

       Returns a (str, TileCoordinate) tuple holding the file extension
       (everything after the first dot of the file name) and the tile
       coordinate in the source numbering scheme.

       Raises TilePathError if the segments do not describe a tile.
    """
    if len(parts) != 3:
        raise TilePathError(f"expected Z/X/Y.ext, got {len(parts)} "
                            "path segments")
    zoom_part, column_part, filename = parts

    row_part, dot, extension = filename.partition(".")
    if not dot:
        raise TilePathError(f"missing file extension: {filename!r}")

    zoom = _parse_number(zoom_part)
    column = _parse_number(column_part)
    row = _parse_number(row_part)

    if zoom > MAX_ZOOM:
        raise TilePathError(f"zoom level {zoom} exceeds {MAX_ZOOM}")
    limit = 1 << zoom
    if column >= limit or row >= limit:
        raise TilePathError(f"tile {zoom}/{column}/{row} is outside the "
                            f"zoom {zoom} grid")

    return extension, TileCoordinate(zoom, column, row)


def relative_parts(root: str, path: str) -> Tuple[str, ...]:
    """Split a path found under root into its segments below root"""
    relative = os.path.relpath(path, root)
    return tuple(relative.split(os.sep))
