"""Tests for stream copying and filesystem helpers."""

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from conftest import NonSeekableStream
from src.lightresize.io_utils import (
    copy_to_memory_stream,
    copy_to_stream,
    ensure_dir,
    is_seekable,
    iter_image_paths,
    map_resample,
    open_write,
)


def _source() -> BytesIO:
    return BytesIO(bytes(range(1, 13)))


class TestCopyToMemoryStream:
    def test_entire_stream_not_at_start_has_same_length(self) -> None:
        source = _source()
        source.seek(5)
        sink = copy_to_memory_stream(source, True, 100)
        assert len(sink.getvalue()) == 12
        assert sink.tell() == 0

    def test_remaining_only_has_remaining_length(self) -> None:
        source = _source()
        source.seek(5)
        sink = copy_to_memory_stream(source, False, 100)
        assert sink.getvalue() == bytes(range(6, 13))

    @pytest.mark.parametrize("chunk_size", [7, 6, 12, 100, 1])
    def test_chunk_sizes_copy_whole_stream(self, chunk_size) -> None:
        sink = copy_to_memory_stream(_source(), True, chunk_size)
        assert sink.getvalue() == bytes(range(1, 13))

    def test_non_seekable_source_copies_from_current_position(self) -> None:
        source = NonSeekableStream(bytes(range(1, 13)))
        source.read(2)
        sink = copy_to_memory_stream(source, True, 4)
        assert sink.getvalue() == bytes(range(3, 13))


class TestCopyToStream:
    def test_returns_bytes_copied(self) -> None:
        destination = BytesIO()
        assert copy_to_stream(_source(), destination, True, 5) == 12
        assert destination.getvalue() == bytes(range(1, 13))


class TestHelpers:
    def test_is_seekable(self) -> None:
        assert is_seekable(BytesIO())
        assert not is_seekable(NonSeekableStream())
        assert not is_seekable(object())

    def test_ensure_dir_creates_nested(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b"
        ensure_dir(target)
        ensure_dir(target)
        assert target.is_dir()

    def test_open_write_truncates(self, tmp_path: Path) -> None:
        path = tmp_path / "out.bin"
        path.write_bytes(b"0123456789")
        with open_write(path) as f:
            f.write(b"ab")
        assert path.read_bytes() == b"ab"

    def test_iter_image_paths(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        for name in ("b.png", "a.JPG", "sub/c.webp", "notes.txt"):
            (tmp_path / name).write_bytes(b"")
        found = [p.relative_to(tmp_path).as_posix() for p in iter_image_paths(tmp_path)]
        assert found == ["a.JPG", "b.png", "sub/c.webp"]
        assert list(iter_image_paths(tmp_path / "notes.txt")) == []

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("nearest", Image.Resampling.NEAREST),
            ("Bilinear", Image.Resampling.BILINEAR),
            ("lanczos", Image.Resampling.LANCZOS),
            ("bicubic", Image.Resampling.BICUBIC),
            ("unknown", Image.Resampling.BICUBIC),
        ],
    )
    def test_map_resample(self, name, expected) -> None:
        assert map_resample(name) == expected
