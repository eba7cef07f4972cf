"""I/O utilities and helpers for the resize pipeline.

This module provides helpers to enumerate input images, copy and buffer
streams, open files for reading and writing, and map resampling method names
to Pillow constants.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Generator, Union

from PIL import Image

from config import CONFIG, IMAGE_EXTENSIONS


PathLike = Union[str, Path]


def iter_image_paths(input_path: Path) -> Generator[Path, None, None]:
    """Yield image file paths from a file or directory.

    Parameters
    ----------
    input_path
        A path to a single image or a directory containing images.

    Yields
    ------
    Path
        Individual image file paths.
    """

    path = Path(input_path)
    if path.is_file():
        if path.suffix.lower() in IMAGE_EXTENSIONS:
            yield path
        return
    if path.is_dir():
        for p in sorted(path.rglob("*")):
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS:
                yield p


def ensure_dir(path: PathLike) -> None:
    """Create a directory if it does not exist.

    Parameters
    ----------
    path
        Directory path to create.
    """

    Path(path).mkdir(parents=True, exist_ok=True)


def open_read(path: PathLike) -> BinaryIO:
    return open(path, "rb")


def open_write(path: PathLike) -> BinaryIO:
    """Open ``path`` for writing, truncating an existing file."""
    return open(path, "wb")


def is_seekable(stream) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable and seekable())


def copy_to_stream(
    source: BinaryIO,
    destination: BinaryIO,
    entire_stream: bool = True,
    chunk_size: int = CONFIG.defaults.chunk_size,
) -> int:
    """Copy ``source`` into ``destination`` in fixed-size chunks.

    Parameters
    ----------
    source
        Stream to read from.
    destination
        Stream to write to.
    entire_stream
        Seek a seekable source to the start first; otherwise copy only the
        data after its current position.
    chunk_size
        Read size in bytes.

    Returns
    -------
    int
        Number of bytes copied.
    """

    if entire_stream and is_seekable(source):
        source.seek(0)

    copied = 0
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        destination.write(chunk)
        copied += len(chunk)
    return copied


def copy_to_memory_stream(
    source: BinaryIO,
    entire_stream: bool = True,
    chunk_size: int = CONFIG.defaults.chunk_size,
) -> BytesIO:
    """Copy ``source`` into a new in-memory stream positioned at 0."""

    buffer = BytesIO()
    copy_to_stream(source, buffer, entire_stream, chunk_size)
    buffer.seek(0)
    return buffer


def map_resample(name: str) -> int:
    """Map a resample name to a Pillow constant.

    Parameters
    ----------
    name
        One of 'nearest', 'bilinear', 'bicubic', 'lanczos'.

    Returns
    -------
    int
        Pillow resampling constant. Unknown names fall back to bicubic.
    """

    name_lower = (name or "").lower()
    if name_lower == "nearest":
        return Image.Resampling.NEAREST
    if name_lower == "bilinear":
        return Image.Resampling.BILINEAR
    if name_lower == "lanczos":
        return Image.Resampling.LANCZOS
    return Image.Resampling.BICUBIC
