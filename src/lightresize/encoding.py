"""Adjustable-quality JPEG and 32-bit PNG encoders."""

from __future__ import annotations

from io import BytesIO
from typing import BinaryIO

from PIL import Image

from .instructions import Instructions, validate_quality
from .io_utils import is_seekable
from .modes import OutputFormat


def save_jpeg(image: Image.Image, target: BinaryIO, quality: int) -> None:
    """Save ``image`` to ``target`` as JPEG.

    Parameters
    ----------
    image
        Image to encode; alpha is discarded.
    target
        Writable binary stream.
    quality
        Between 0 and 100.

    Raises
    ------
    ValidationError
        If ``quality`` is not an integer between 0 and 100.
    """

    validate_quality(quality)
    if image.mode == "RGB":
        image.save(target, format="JPEG", quality=quality)
        return
    with image.convert("RGB") as rgb:
        rgb.save(target, format="JPEG", quality=quality)


def save_png(image: Image.Image, target: BinaryIO) -> None:
    """Save ``image`` to ``target`` as PNG.

    A non-seekable ``target`` gets the encoded bytes through a seekable
    in-memory intermediate.
    """

    if not is_seekable(target):
        with BytesIO() as buffer:
            image.save(buffer, format="PNG")
            target.write(buffer.getvalue())
        return
    image.save(target, format="PNG")


def encode(image: Image.Image, target: BinaryIO, instructions: Instructions) -> None:
    if instructions.format is OutputFormat.PNG:
        save_png(image, target)
    else:
        save_jpeg(image, target, instructions.jpeg_quality)
