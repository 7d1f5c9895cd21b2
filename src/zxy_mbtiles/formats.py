"""Tile payload formats and the guard that keeps an archive to a single
format."""

from enum import Enum
from typing import Optional

from .exceptions import FormatMismatchError, UnsupportedFormatError


class TileFormat(str, Enum):
    """Tile payload format. The value is written to the archive's format
       metadata entry."""

    PNG = "png"
    JPEG = "jpg"
    WEBP = "webp"
    PBF = "pbf"

    @classmethod
    def from_extension(cls, extension: str) -> "TileFormat":
        """Classify a tile file extension

           Arguments:
           extension (str): file extension without the leading dot

           Raises UnsupportedFormatError for unknown extensions
        """
        try:
            return _EXTENSIONS[extension.lower()]
        except KeyError:
            raise UnsupportedFormatError(
                f"unsupported extension: {extension!r}") from None


_EXTENSIONS = {
    "png": TileFormat.PNG,
    "jpg": TileFormat.JPEG,
    "jpeg": TileFormat.JPEG,
    "webp": TileFormat.WEBP,
    "pbf": TileFormat.PBF,
}


class FormatGuard:
    """Locks the archive to the format of the first tile ingested"""

    def __init__(self) -> None:
        self.format: Optional[TileFormat] = None

    def check(self, tile_format: TileFormat, label: str) -> TileFormat:
        """Record or validate the format of a tile

           Arguments:
           tile_format (TileFormat): format of the tile being ingested
           label (str):              tile name used in the error message

           Returns the locked format. Raises FormatMismatchError when a
           different format was locked by an earlier tile.
        """
        if self.format is None:
            self.format = tile_format
        elif tile_format is not self.format:
            raise FormatMismatchError(f"File format mismatch: {label} "
                                      f"(archive format is "
                                      f"{self.format.value})")
        return self.format
