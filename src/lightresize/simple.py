"""Single-purpose resize: max constraints, JPEG output, stream to stream.

Simpler and less flexible than :class:`~.resize_job.ResizeJob`: it always
closes both streams and cannot resize a file onto itself.
"""

from __future__ import annotations

import math
from contextlib import ExitStack
from typing import BinaryIO, Optional

from PIL import Image

from config import CONFIG
from .box_math import Size
from .decoding import decode_image
from .encoding import save_jpeg
from .instructions import validate_quality
from .io_utils import map_resample


def max_constrained_size(
    original: Size, max_width: Optional[int], max_height: Optional[int]
) -> Size:
    """Size that fits ``max_width`` x ``max_height`` without upscaling.

    Dimensions are rounded up. Constraints below 1 count as unset.
    """

    image_ratio = original.width / original.height
    w = float(max_width) if max_width is not None and max_width >= 1 else -1.0
    h = float(max_height) if max_height is not None and max_height >= 1 else -1.0
    if w < 1 and h < 1:
        return original
    if w < 1:
        w = h * image_ratio
    elif h < 1:
        h = w / image_ratio

    if w / h > image_ratio:
        # Bound by height
        scaled = Size(math.ceil(image_ratio * h), math.ceil(h))
    else:
        scaled = Size(math.ceil(w), math.ceil(w / image_ratio))

    if original.width <= scaled.width and original.height <= scaled.height:
        return original
    return scaled


def resize_jpeg(
    source: BinaryIO,
    destination: BinaryIO,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
    jpeg_quality: int = CONFIG.defaults.jpeg_quality,
) -> Size:
    """Resize ``source`` to fit the given maximums and write JPEG to ``destination``.

    The decoded image, ``source`` and ``destination`` are closed, in that
    order, whether or not the resize succeeds.

    Returns
    -------
    Size
        Dimensions of the written image.
    """

    with ExitStack() as stack:
        stack.callback(destination.close)
        stack.callback(source.close)

        validate_quality(jpeg_quality)

        image = stack.enter_context(decode_image(source))
        size = max_constrained_size(Size(*image.size), max_width, max_height)

        canvas = stack.enter_context(Image.new("RGB", size, (255, 255, 255)))
        rgba = stack.enter_context(image.convert("RGBA"))
        resized = stack.enter_context(rgba.resize(size, map_resample(CONFIG.defaults.resample)))
        canvas.paste(resized, (0, 0), resized)
        save_jpeg(canvas, destination, jpeg_quality)
    return size
