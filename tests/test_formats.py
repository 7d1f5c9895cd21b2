import pytest

from zxy_mbtiles.exceptions import (FormatMismatchError, TilePathError,
                                    UnsupportedFormatError)
from zxy_mbtiles.formats import FormatGuard, TileFormat


@pytest.mark.parametrize("extension,expected", [
    ("png", TileFormat.PNG),
    ("PNG", TileFormat.PNG),
    ("jpg", TileFormat.JPEG),
    ("jpeg", TileFormat.JPEG),
    ("JPeG", TileFormat.JPEG),
    ("webp", TileFormat.WEBP),
    ("pbf", TileFormat.PBF),
])
def test_from_extension(extension, expected):
    assert TileFormat.from_extension(extension) is expected


@pytest.mark.parametrize("extension", ["", "gif", "tif", "png.bak", "mvt"])
def test_unsupported_extension(extension):
    with pytest.raises(UnsupportedFormatError):
        TileFormat.from_extension(extension)


def test_unsupported_extension_is_a_skip_error():
    assert issubclass(UnsupportedFormatError, TilePathError)


def test_metadata_values():
    assert [f.value for f in TileFormat] == ["png", "jpg", "webp", "pbf"]


def test_guard_locks_on_first_format():
    guard = FormatGuard()
    assert guard.format is None

    assert guard.check(TileFormat.WEBP, "0/0/0.webp") is TileFormat.WEBP
    assert guard.format is TileFormat.WEBP
    assert guard.check(TileFormat.WEBP, "1/0/0.webp") is TileFormat.WEBP


def test_guard_treats_jpg_and_jpeg_as_one_format():
    guard = FormatGuard()
    guard.check(TileFormat.from_extension("jpg"), "0/0/0.jpg")
    guard.check(TileFormat.from_extension("jpeg"), "1/0/0.jpeg")
    assert guard.format is TileFormat.JPEG


@pytest.mark.parametrize("first,second", [
    (TileFormat.PNG, TileFormat.JPEG),
    (TileFormat.JPEG, TileFormat.PNG),
    (TileFormat.PBF, TileFormat.WEBP),
])
def test_guard_rejects_mismatch(first, second):
    guard = FormatGuard()
    guard.check(first, "0/0/0")

    with pytest.raises(FormatMismatchError) as excinfo:
        guard.check(second, f"1/1/0.{second.value}")

    assert f"1/1/0.{second.value}" in str(excinfo.value)
    assert guard.format is first
