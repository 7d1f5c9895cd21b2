#!/usr/bin/env python3
"""
ZXY to MBTiles Converter

This script packs a ZXY directory of tiles (Z/X/Y.ext) into a new MBTiles
archive. All tiles must share one format (png, jpg, webp or pbf). Rows
are read in the XYZ numbering by default and flipped to the MBTiles
(TMS) numbering before storage.
"""

import os
import sys
import time
import click
import sqlite3

from tqdm import tqdm
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterator, Optional

from .archive import MBTilesWriter, resolve_name
from .exceptions import (NoUsableTilesError, TileArchiveError,
                         TilePathError, UnsupportedFormatError)
from .formats import FormatGuard, TileFormat
from .tiles import (Scheme, TileRecord, ZoomRange, parse_tile_path,
                    relative_parts)


@dataclass
class IngestState:
    """Values accumulated while walking the ZXY directory"""

    guard: FormatGuard = field(default_factory=FormatGuard)
    zoom_range: ZoomRange = field(default_factory=ZoomRange)
    tiles_ingested: int = 0
    files_skipped: int = 0


@dataclass
class IngestSummary:
    """Result of a completed archive construction"""

    tile_format: TileFormat
    zoom_range: ZoomRange
    tiles_ingested: int
    files_skipped: int


class MBTilesConstructor:
    """Constructs an MBTiles archive from a ZXY directory of tiles"""

    def __init__(self, zxy_dir: str, mbtiles_path: str,
                 scheme: Scheme = Scheme.XYZ, name: Optional[str] = None,
                 description: Optional[str] = None, verbose: bool = False,
                 commit_interval: int = 1000) -> None:
        """Initialize a new MBTilesConstructor instance

           Arguments:
           zxy_dir (str):                  path to the ZXY directory structure
           mbtiles_path (str):             path to the resulting MBTiles file.
                                           must not exist.
           scheme (Scheme):                row numbering of the source tiles.
                                           defaults to Scheme.XYZ.
           name (optional[str]):           tileset name. defaults to the
                                           archive file name.
           description (optional[str]):    tileset description. defaults to
                                           None.
           verbose (bool):                 print every tile as it is added
           commit_interval (int):          tile inserts per database commit
        """
        self.zxy_dir = str(zxy_dir)
        self.mbtiles_path = str(mbtiles_path)
        self.scheme = Scheme(scheme)
        self.name = name
        self.description = description
        self.verbose = verbose
        self.commit_interval = commit_interval

        # Start time for the archive construction
        self.start_time = time.time()

    def _bold(self, text: str) -> str:
        """Return the given string wrapped in ANSI escape codes for bold
           formatting

           Arguments:
           text (str): string to wrap
        """
        return f"\033[1m{text}\033[0m"

    def _echo(self, message: str, err: bool = False) -> None:
        # tqdm.write keeps the progress bar intact
        tqdm.write(message, file=sys.stderr if err else sys.stdout)

    def _walk_files(self) -> Iterator[str]:
        """Yield the path of every file below the ZXY directory

           Raises TileArchiveError if a directory cannot be listed
        """
        def on_error(error: OSError) -> None:
            raise TileArchiveError(f"Error walking directory: {error}")

        for dirpath, dirnames, filenames in os.walk(self.zxy_dir,
                                                    onerror=on_error):
            dirnames.sort()
            for filename in sorted(filenames):
                yield os.path.join(dirpath, filename)

    def _ingest_file(self, writer: MBTilesWriter, state: IngestState,
                     path: str) -> bool:
        """Add a single file to the archive

           Arguments:
           writer (MBTilesWriter): archive writer
           state (IngestState):    run accumulator, updated in place
           path (str):             path of the file

           Returns True if the file was added, False if it was skipped
        """
        try:
            extension, coordinate = parse_tile_path(
                relative_parts(self.zxy_dir, path))
        except TilePathError:
            self._echo(f"Unexpected file, skipping: {path}", err=True)
            return False

        try:
            tile_format = TileFormat.from_extension(extension)
        except UnsupportedFormatError:
            self._echo(f"Unsupported extension, skipping: {path}", err=True)
            return False

        label = f"{coordinate}.{extension}"
        state.guard.check(tile_format, label)

        if self.verbose:
            self._echo(f"Adding {label}")

        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise TileArchiveError(f"Error reading file {path}: {e}") from e

        tile = TileRecord(coordinate.to_scheme(self.scheme), tile_format,
                          data)
        try:
            writer.insert_tile(tile)
        except sqlite3.Error as e:
            raise TileArchiveError(f"Error inserting tile {label}: {e}") \
                from e

        state.zoom_range.add(coordinate.zoom)
        return True

    def _ingest(self, writer: MBTilesWriter) -> IngestState:
        """Walk the ZXY directory and insert every usable tile"""
        state = IngestState()

        with tqdm(desc="Inserting tiles", unit=" tiles", miniters=5000,
                  mininterval=2, disable=None) as pbar:
            for path in self._walk_files():
                if self._ingest_file(writer, state, path):
                    state.tiles_ingested += 1
                    pbar.update(1)
                else:
                    state.files_skipped += 1

        return state

    def build_archive(self) -> IngestSummary:
        """Build the MBTiles archive

           Raises TileArchiveError (or one of its subclasses) if the
           archive cannot be built. A partially written archive is left
           on disk in that case.
        """
        print(self._bold(f"Source: {self.zxy_dir}"))
        print(self._bold(f"Output: {self.mbtiles_path}"))
        print(self._bold(f"Scheme: {self.scheme.value}"))

        try:
            writer = MBTilesWriter.create(self.mbtiles_path,
                                          self.commit_interval)
        except sqlite3.Error as e:
            raise TileArchiveError(f"Error creating output: {e}") from e

        with writer:
            state = self._ingest(writer)

            tile_format = state.guard.format
            if tile_format is None:
                raise NoUsableTilesError("No usable tiles found in "
                                         f"{self.zxy_dir}")

            name = resolve_name(self.name, self.mbtiles_path)
            try:
                writer.finalize(name, tile_format, state.zoom_range,
                                self.description)
            except sqlite3.Error as e:
                raise TileArchiveError(f"Error inserting metadata: {e}") \
                    from e

        # Print runtime
        total_time = time.time() - self.start_time
        print(self._bold("\nArchive is complete!"))
        print(f"Tiles: {state.tiles_ingested} ({tile_format.value})")
        print(f"Zoom Range: {state.zoom_range.min} to "
              f"{state.zoom_range.max}")
        if state.files_skipped:
            print(f"Skipped files: {state.files_skipped}")
        print(f"Total runtime: {timedelta(seconds=int(total_time))}")

        # Print archive size
        file_size = os.path.getsize(self.mbtiles_path)
        file_size_mb = file_size / (1024 * 1024)
        print(f"Archive size: {file_size_mb:.1f} MB")

        return IngestSummary(tile_format, state.zoom_range,
                             state.tiles_ingested, state.files_skipped)


@click.command()
@click.argument('source_dir', type=click.Path(exists=True, file_okay=False))
@click.argument('target_file', type=click.Path())
@click.option('--name', '-n', default=None,
              help='Tileset name (default: target file name)')
@click.option('--description', default=None,
              help='Tileset description')
@click.option('--scheme', '-s', default='xyz',
              type=click.Choice(['xyz', 'tms'], case_sensitive=False),
              help='Row numbering of the source tiles (default: xyz)')
@click.option('--batchsize', 'batch_size', default=1000,
              type=click.IntRange(min=1),
              help='Tile inserts per database commit (default: 1000)')
@click.option('--verbose', '-v', is_flag=True, default=False,
              help='Print every tile as it is added')
@click.help_option('--help', '-h')
def main(source_dir, target_file, name, description, scheme, batch_size,
         verbose):
    """
    Construct an MBTiles archive from a ZXY directory of tiles.

    Arguments:

       SOURCE_DIR: ZXY directory of tiles (Z/X/Y.ext)

       TARGET_FILE: Output path for the MBTiles archive. Must not exist.

    Examples:

       # Basic conversion

       zxy-mbtiles ./tiles/ tileset.mbtiles

       # Source rows already numbered from the south

       zxy-mbtiles ./tiles/ tileset.mbtiles --scheme tms

       # With custom metadata

       zxy-mbtiles ./tiles/ tileset.mbtiles --name "Hillshade tiles"
    """
    constructor = MBTilesConstructor(source_dir, target_file,
                                     Scheme(scheme.lower()), name,
                                     description, verbose, batch_size)
    try:
        constructor.build_archive()
    except TileArchiveError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
