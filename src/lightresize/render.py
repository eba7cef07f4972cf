"""Render stage: draws the copy rectangle of a source onto a new canvas."""

from __future__ import annotations

from typing import Optional

from PIL import Image

from config import CONFIG
from .box_math import RectF, round_rect
from .instructions import Color, Instructions
from .io_utils import map_resample
from .layout import LayoutResult
from .modes import OutputFormat


TRANSPARENT: Color = (0, 0, 0, 0)
WHITE: Color = (255, 255, 255, 255)

# Source modes that can never let the background show through
OPAQUE_MODES = {"1", "L", "RGB", "CMYK", "YCbCr", "LAB", "HSV", "I", "F"}


def covers_canvas(target_rect: RectF, canvas_size) -> bool:
    return (
        target_rect.x == 0
        and target_rect.y == 0
        and target_rect.width == canvas_size[0]
        and target_rect.height == canvas_size[1]
    )


def resolve_background(
    source: Image.Image, result: LayoutResult, instructions: Instructions
) -> Optional[Color]:
    """Background to fill, or ``None`` to leave the canvas transparent.

    JPEG cannot store transparency, so a transparent background becomes white
    unless the source is opaque and covers the whole canvas.
    """

    background = instructions.background_color
    if background is not None or instructions.format is not OutputFormat.JPEG:
        return background
    nothing_to_show = (
        source.mode in OPAQUE_MODES
        and "transparency" not in source.info
        and covers_canvas(result.target_rect, result.canvas_size)
    )
    return None if nothing_to_show else WHITE


def render(
    source: Image.Image,
    result: LayoutResult,
    instructions: Instructions,
    resample: str = CONFIG.defaults.resample,
) -> Image.Image:
    """Render ``result.copy_rect`` of ``source`` into ``result.target_rect``.

    Parameters
    ----------
    source
        Decoded source image.
    result
        Layout for this resize.
    instructions
        Background color and output format.
    resample
        Interpolation name, see :func:`io_utils.map_resample`.

    Returns
    -------
    Image.Image
        A new RGBA canvas of ``result.canvas_size``. The caller owns it.
    """

    background = resolve_background(source, result, instructions)
    canvas = Image.new("RGBA", result.canvas_size, background or TRANSPARENT)

    target = round_rect(result.target_rect)
    copy = result.copy_rect
    box = (copy.x, copy.y, copy.right, copy.bottom)

    try:
        with source.convert("RGBA") as rgba:
            # Sampling is clamped to the copy box, so edges get no border bleed
            size = (target.width, target.height)
            with rgba.resize(size, map_resample(resample), box=box) as content:
                canvas.alpha_composite(content, dest=(target.x, target.y))
    except BaseException:
        canvas.close()
        raise
    return canvas
