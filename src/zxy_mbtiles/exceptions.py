"""Exceptions raised while converting a ZXY directory into an MBTiles
archive.

Two families are defined. Subclasses of TileArchiveError abort the
conversion. Subclasses of TilePathError mark a single file that is not
a usable tile; the converter reports it and moves on to the next file.
"""


class TileArchiveError(Exception):
    """Fatal error that aborts the archive construction"""


class TargetExistsError(TileArchiveError):
    """Raised when the output archive path already exists"""


class FormatMismatchError(TileArchiveError):
    """Raised when a tile's format differs from the format of the tiles
       already ingested"""


class NoUsableTilesError(TileArchiveError):
    """Raised when the traversal finished without ingesting a tile"""


class TilePathError(ValueError):
    """Raised when a file path does not follow the Z/X/Y.ext layout"""


class UnsupportedFormatError(TilePathError):
    """Raised when a tile file extension maps to no known tile format"""
