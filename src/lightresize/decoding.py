"""Decoder adapter: bytes or a binary stream to a fully loaded Pillow image."""

from __future__ import annotations

from io import BytesIO
from typing import BinaryIO

from loguru import logger
from PIL import Image, ImageCms, UnidentifiedImageError

from .errors import DecodeError
from .io_utils import is_seekable


# Modes that can be converted to sRGB without changing the channel layout
_CMS_MODES = {"RGB": "RGB", "RGBA": "RGBA", "CMYK": "RGB"}


def _apply_icc(image: Image.Image, ignore_icc: bool) -> Image.Image:
    icc = image.info.get("icc_profile")
    if not icc:
        return image
    if ignore_icc:
        image.info.pop("icc_profile", None)
        return image
    output_mode = _CMS_MODES.get(image.mode)
    if output_mode is None:
        logger.debug("Leaving ICC profile unapplied for mode {}", image.mode)
        return image

    try:
        converted = ImageCms.profileToProfile(
            image,
            ImageCms.ImageCmsProfile(BytesIO(icc)),
            ImageCms.createProfile("sRGB"),
            outputMode=output_mode,
        )
    except (ImageCms.PyCMSError, OSError) as e:
        image.close()
        raise DecodeError(f"Cannot apply embedded ICC profile: {e}") from e
    converted.info.pop("icc_profile", None)
    image.close()
    return converted


def decode_bytes(data: bytes, ignore_icc: bool = False) -> Image.Image:
    """Decode encoded image bytes.

    Parameters
    ----------
    data
        Encoded image (any format Pillow can read).
    ignore_icc
        Drop an embedded ICC profile instead of converting to sRGB.

    Returns
    -------
    Image.Image
        A loaded image that owns no external resources.

    Raises
    ------
    DecodeError
        If the data is empty, truncated or not a supported image, or if an
        embedded ICC profile cannot be applied.
    """

    if not data:
        raise DecodeError("Source stream is empty")
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise DecodeError(f"Cannot decode source image: {e}") from e
    return _apply_icc(image, ignore_icc)


def decode_image(stream: BinaryIO, ignore_icc: bool = False) -> Image.Image:
    """Decode the whole of ``stream``, reading from its start when seekable.

    The stream is left open and positioned after the data that was read.
    """

    if is_seekable(stream):
        stream.seek(0)
    return decode_bytes(stream.read(), ignore_icc=ignore_icc)
