"""Enumerations controlling how a resize is laid out and encoded."""

from __future__ import annotations

from enum import Enum


class FitMode(str, Enum):
    """How to resolve aspect ratio differences between the requested box and the source.

    MAX
        Width and height are maximum values; the result keeps the source aspect
        ratio and may be smaller than requested.
    PAD
        Width and height are exact; padding fills any aspect ratio difference.
    CROP
        Width and height are exact; the source is center-cropped to the box
        aspect ratio.
    STRETCH
        Width and height are exact; the image is distorted to fill them.
    """

    MAX = "max"
    PAD = "pad"
    CROP = "crop"
    STRETCH = "stretch"


class ScaleMode(str, Enum):
    """Whether content and/or canvas may grow beyond the source size."""

    DOWNSCALE_ONLY = "down"
    BOTH = "both"
    UPSCALE_CANVAS = "canvas"


class OutputFormat(str, Enum):
    JPEG = "jpeg"
    PNG = "png"


# Alternative spellings accepted when parsing user input
ALIASES = {
    "jpg": OutputFormat.JPEG,
    "downscaleonly": ScaleMode.DOWNSCALE_ONLY,
    "downscale_only": ScaleMode.DOWNSCALE_ONLY,
    "upscalecanvas": ScaleMode.UPSCALE_CANVAS,
    "upscale_canvas": ScaleMode.UPSCALE_CANVAS,
}
