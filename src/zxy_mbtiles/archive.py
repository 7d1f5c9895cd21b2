"""MBTiles archive writer

Owns the SQLite connection of the archive being built: creates the
schema, inserts tiles and writes the metadata once all tiles are in.
"""

import os
import sqlite3

from pathlib import PurePath
from typing import Optional

from .exceptions import TargetExistsError
from .formats import TileFormat
from .tiles import TileRecord, ZoomRange

FALLBACK_NAME = "noname"

SCHEMA = """
    CREATE TABLE metadata (
        name TEXT NOT NULL,
        value TEXT NOT NULL,
        UNIQUE(name)
    );

    CREATE TABLE tiles (
        zoom_level INTEGER NOT NULL,
        tile_column INTEGER NOT NULL,
        tile_row INTEGER NOT NULL,
        tile_data BLOB NOT NULL,
        PRIMARY KEY (zoom_level, tile_column, tile_row)
    );
"""


def resolve_name(name: Optional[str], mbtiles_path: str) -> str:
    """Return the tileset name for the archive

       Arguments:
       name (optional[str]): explicit tileset name
       mbtiles_path (str):   path of the archive

       An explicit name always wins. Otherwise the archive file name
       without its extension is used, or "noname" if the path has no
       file name.
    """
    if name is not None:
        return name
    stem = PurePath(mbtiles_path).stem
    if stem and stem != "..":
        return stem
    return FALLBACK_NAME


class MBTilesWriter:
    """Writes tiles and metadata into a new MBTiles archive"""

    def __init__(self, conn: sqlite3.Connection,
                 commit_interval: int = 1000) -> None:
        """Wrap an open connection. Use MBTilesWriter.create() to make a
           new archive.

           Arguments:
           conn (sqlite3.Connection): connection to the archive
           commit_interval (int):     number of tile inserts per commit
        """
        self.conn = conn
        self.commit_interval = commit_interval
        self.tiles_written = 0

    @classmethod
    def create(cls, mbtiles_path: str,
               commit_interval: int = 1000) -> "MBTilesWriter":
        """Create a new archive with an empty schema

           Arguments:
           mbtiles_path (str):    path of the archive to create
           commit_interval (int): number of tile inserts per commit

           Raises TargetExistsError if anything exists at mbtiles_path and
           sqlite3.Error if the database cannot be created.
        """
        if os.path.lexists(mbtiles_path):
            raise TargetExistsError(f"Target file exists: {mbtiles_path}")

        conn = sqlite3.connect(mbtiles_path)
        try:
            # A crash leaves a partial archive that has to be deleted
            # anyway, so skip the fsync calls
            conn.execute("PRAGMA synchronous=OFF")
            conn.executescript(SCHEMA)
            conn.commit()
        except sqlite3.Error:
            conn.close()
            raise

        return cls(conn, commit_interval)

    def __enter__(self) -> "MBTilesWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def insert_tile(self, tile: TileRecord) -> None:
        """Insert a single tile

           Arguments:
           tile (TileRecord): tile with its row in the MBTiles numbering

           Raises sqlite3.IntegrityError if the coordinate is already
           present in the archive.
        """
        zoom, column, row = tile.coordinate
        self.conn.execute(
            """INSERT INTO tiles (zoom_level, tile_column, tile_row,
               tile_data) VALUES (?, ?, ?, ?)""",
            (zoom, column, row, tile.data)
        )
        self.tiles_written += 1

        if self.tiles_written % self.commit_interval == 0:
            self.conn.commit()

    def finalize(self, name: str, tile_format: TileFormat,
                 zoom_range: ZoomRange,
                 description: Optional[str] = None) -> None:
        """Write the archive metadata

           Arguments:
           name (str):                  tileset name
           tile_format (TileFormat):    format shared by all tiles
           zoom_range (ZoomRange):      zoom levels of the ingested tiles
           description (optional[str]): tileset description
        """
        metadata = [
            ("name", name),
            ("format", tile_format.value),
        ]
        if zoom_range:
            metadata.append(("minzoom", str(zoom_range.min)))
            metadata.append(("maxzoom", str(zoom_range.max)))
        if description:
            metadata.append(("description", description))

        self.conn.executemany(
            "INSERT INTO metadata (name, value) VALUES (?, ?)", metadata)
        self.conn.commit()

    def close(self) -> None:
        """Commit pending tiles and close the connection"""
        try:
            self.conn.commit()
        finally:
            self.conn.close()
