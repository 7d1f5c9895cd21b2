import sqlite3
from pathlib import Path

import pytest


@pytest.fixture
def zxy_dir(tmp_path: Path) -> Path:
    src = tmp_path / "tiles"
    src.mkdir()
    return src


@pytest.fixture
def make_tile(zxy_dir: Path):
    """Write a tile file below the ZXY directory and return its path"""

    def _make(relative: str, data: bytes = b"tile") -> Path:
        path = zxy_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _make


def read_tiles(path: Path):
    conn = sqlite3.connect(str(path))
    try:
        return conn.execute(
            "SELECT zoom_level, tile_column, tile_row, tile_data FROM tiles "
            "ORDER BY zoom_level, tile_column, tile_row"
        ).fetchall()
    finally:
        conn.close()


def read_metadata(path: Path) -> dict:
    conn = sqlite3.connect(str(path))
    try:
        return dict(conn.execute("SELECT name, value FROM metadata"))
    finally:
        conn.close()
