"""Layout engine: where the source goes on the destination canvas.

``layout`` is a pure function of the source size and the instructions. It
returns the region of the source to sample (``copy_rect``), where that region
lands on the output (``target_rect``) and the output size (``canvas_size``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .box_math import (
    RectF,
    Size,
    SizeF,
    center_inside,
    fits_inside,
    round_rect,
    round_size,
    scale_inside,
)
from .instructions import Instructions
from .modes import FitMode, ScaleMode


@dataclass(frozen=True)
class LayoutResult:
    """Derived geometry for a single resize.

    Attributes
    ----------
    copy_rect
        Region of the source to sample, in source pixel space.
    target_rect
        Where the sampled region is drawn, centered within the canvas.
    canvas_size
        Output pixel dimensions, both at least 1.
    """

    copy_rect: RectF
    target_rect: RectF
    canvas_size: Size


def _normalize(value: Optional[int]) -> Optional[int]:
    if value is not None and value < 1:
        return None
    return value


def constraint_bounds(
    original_size: Size, width: Optional[int], height: Optional[int]
) -> SizeF:
    """Requested box, filling in a missing dimension from the source aspect ratio."""

    image_ratio = original_size.width / original_size.height
    if width is not None and height is not None:
        return SizeF(float(width), float(height))
    if width is not None:
        return SizeF(float(width), width / image_ratio)
    return SizeF(height * image_ratio, float(height))


def layout(original_size: Size, instructions: Instructions) -> LayoutResult:
    """Compute copy rectangle, target rectangle and canvas size.

    Parameters
    ----------
    original_size
        Source image dimensions.
    instructions
        Width/height constraints, fit mode and scale mode.

    Returns
    -------
    LayoutResult
        Geometry for the render stage.
    """

    original_size = Size(*original_size)
    original_rect = RectF.from_size(original_size)
    copy_rect = original_rect

    width = _normalize(instructions.width)
    height = _normalize(instructions.height)

    if width is not None or height is not None:
        bounds = constraint_bounds(original_size, width, height)

        mode = instructions.mode
        if mode is FitMode.MAX:
            canvas_size = target_size = scale_inside(copy_rect.size, bounds)
        elif mode is FitMode.PAD:
            canvas_size = bounds
            target_size = scale_inside(copy_rect.size, canvas_size)
        elif mode is FitMode.CROP:
            canvas_size = target_size = bounds
            # Largest region with the box aspect ratio, centered on the source
            source_size = round_size(scale_inside(canvas_size, copy_rect.size))
            source_size = Size(max(1, source_size.width), max(1, source_size.height))
            copy_rect = RectF(*round_rect(center_inside(source_size, copy_rect)))
        else:
            canvas_size = target_size = bounds
    else:
        canvas_size = target_size = SizeF(*original_size)

    # Never enlarge content unless asked to; optionally keep the larger canvas
    scale = instructions.scale
    if scale is not ScaleMode.BOTH and fits_inside(original_size, target_size):
        target_size = SizeF(*original_size)
        copy_rect = original_rect
        if scale is not ScaleMode.UPSCALE_CANVAS:
            canvas_size = target_size

    canvas = Size(
        max(1, int(round(canvas_size.width))), max(1, int(round(canvas_size.height)))
    )
    target = Size(
        max(1, int(round(target_size.width))), max(1, int(round(target_size.height)))
    )

    target_rect = center_inside(target, RectF.from_size(canvas))
    return LayoutResult(copy_rect=copy_rect, target_rect=target_rect, canvas_size=canvas)
