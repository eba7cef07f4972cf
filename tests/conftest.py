"""Test configuration and fixtures for lightresize.

This module provides:
- In-memory image generation (PNG/JPEG bytes and streams)
- Stream doubles that record when they are closed or cannot seek
- A ResizeJob subclass recording the order in which resources are released
"""

from io import BytesIO
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from src.lightresize import resize_job
from src.lightresize.resize_job import ResizeJob


# ============================================================================
# Image helpers
# ============================================================================


def make_image(width: int, height: int, mode: str = "RGB") -> Image.Image:
    """Deterministic gradient image so resampling has something to chew on."""
    image = Image.new(mode, (width, height))
    if mode in ("RGB", "RGBA"):
        pixels = [
            ((x * 255) // max(1, width - 1), (y * 255) // max(1, height - 1), 128)
            + ((255,) if mode == "RGBA" else ())
            for y in range(height)
            for x in range(width)
        ]
        image.putdata(pixels)
    return image


def image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    with make_image(width, height, mode) as image, BytesIO() as buffer:
        image.save(buffer, format=fmt)
        return buffer.getvalue()


def image_stream(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> BytesIO:
    return BytesIO(image_bytes(width, height, fmt, mode))


def decoded_size(data: bytes) -> tuple:
    with Image.open(BytesIO(data)) as image:
        return image.size


# ============================================================================
# Stream doubles
# ============================================================================


class TrackedStream(BytesIO):
    """BytesIO that appends ``name`` to ``events`` the first time it is closed."""

    def __init__(self, data: bytes, events: list, name: str) -> None:
        super().__init__(data)
        self.events = events
        self.name = name

    def close(self) -> None:
        if not self.closed:
            self.events.append(self.name)
        super().close()


class NonSeekableStream:
    """Minimal read/write stream without seek support."""

    def __init__(self, data: bytes = b"") -> None:
        self._inner = BytesIO(data)
        self.written = bytearray()
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        return self._inner.read(size)

    def write(self, data) -> int:
        self.written.extend(data)
        return len(data)

    def seekable(self) -> bool:
        return False

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.closed = True


def track_close(image: Image.Image, events: list, name: str, fail: bool = False) -> Image.Image:
    original_close = image.close

    def close() -> None:
        events.append(name)
        original_close()
        if fail:
            raise OSError(f"{name} failed to close")

    image.close = close
    return image


class TrackingJob(ResizeJob):
    """Records when the decoded image and the canvas are closed."""

    def __init__(self, events: list, fail_image_close: bool = False, fail_render: bool = False) -> None:
        super().__init__()
        self.events = events
        self.fail_image_close = fail_image_close
        self.fail_render = fail_render

    def decode(self, stream, instructions):
        image = super().decode(stream, instructions)
        return track_close(image, self.events, "image", fail=self.fail_image_close)

    def render(self, source, result, instructions):
        if self.fail_render:
            raise RuntimeError("render failed")
        return track_close(super().render(source, result, instructions), self.events, "canvas")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def tracked_buffers(monkeypatch, events) -> list:
    """Make the job's private source buffer a TrackedStream named 'buffer'."""
    real_copy = resize_job.copy_to_memory_stream

    def tracked_copy(source, **kwargs):
        return TrackedStream(real_copy(source, **kwargs).getvalue(), events, "buffer")

    monkeypatch.setattr(resize_job, "copy_to_memory_stream", tracked_copy)
    return events


@pytest.fixture
def png_file(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str = "source.png", width: int = 100, height: int = 100) -> Path:
        path = tmp_path / name
        path.write_bytes(image_bytes(width, height))
        return path

    return _make
