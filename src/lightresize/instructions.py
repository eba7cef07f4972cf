"""Validated resize instructions.

Every field is checked when it is assigned, including during construction, so
an ``Instructions`` instance can never hold an out-of-range value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import parse_qs

from PIL import ImageColor

from config import CONFIG
from .errors import ValidationError
from .modes import ALIASES, FitMode, OutputFormat, ScaleMode


E = TypeVar("E", bound=Enum)

Color = Tuple[int, int, int, int]
ColorLike = Union[str, Tuple[int, ...], None]


def _positive_or_none(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be None or an integer, got {value!r}")
    if value < 1:
        raise ValidationError(f"{name} must be None or a positive number, got {value}")
    return value


def validate_quality(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"jpeg_quality must be an integer, got {value!r}")
    if value < 0 or value > 100:
        raise ValidationError(f"jpeg_quality must be between 0 and 100, got {value}")
    return value


def coerce_enum(enum_cls: Type[E], value: Any, name: str) -> E:
    """Convert ``value`` (member, value or alias string) to a member of ``enum_cls``."""

    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        alias = ALIASES.get(key)
        if isinstance(alias, enum_cls):
            return alias
        for member in enum_cls:
            if key in (member.value, member.name.lower()):
                return member
    choices = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"{name} must be one of: {choices}; got {value!r}")


def parse_color(value: ColorLike) -> Optional[Color]:
    """Normalize a color to an RGBA tuple, or ``None`` for transparent.

    Parameters
    ----------
    value
        ``None``, ``"transparent"``, any color string understood by
        ``PIL.ImageColor`` or an RGB/RGBA tuple of 0-255 integers.
    """

    if value is None:
        return None
    if isinstance(value, str):
        if value.strip().lower() == "transparent":
            return None
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as e:
            raise ValidationError(f"Unknown color {value!r}") from e
        return rgb if len(rgb) == 4 else (*rgb, 255)
    if isinstance(value, tuple) and len(value) in (3, 4):
        if all(isinstance(c, int) and 0 <= c <= 255 for c in value):
            return value if len(value) == 4 else (*value, 255)
    raise ValidationError(f"background_color must be a color string or RGB(A) tuple, got {value!r}")


@dataclass
class Instructions:
    """Specifies how an image should be resized and encoded.

    Attributes
    ----------
    width, height
        Optional size constraints; each must be ``None`` or >= 1. Leaving both
        unset keeps the native size.
    mode
        How to reconcile the requested box with the source aspect ratio.
    scale
        Whether upscaling is permitted.
    format
        Encoding used when writing to a stream or path.
    jpeg_quality
        JPEG quality between 0 and 100 inclusive.
    background_color
        RGBA fill, or ``None`` for transparent. Transparent becomes white for
        JPEG output whenever the background could show.
    ignore_icc
        Drop an embedded ICC profile instead of applying it.
    """

    width: Optional[int] = None
    height: Optional[int] = None
    mode: FitMode = FitMode.MAX
    scale: ScaleMode = ScaleMode.DOWNSCALE_ONLY
    format: OutputFormat = OutputFormat.JPEG
    jpeg_quality: int = CONFIG.defaults.jpeg_quality
    background_color: Optional[Color] = None
    ignore_icc: bool = False

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("width", "height"):
            value = _positive_or_none(name, value)
        elif name == "mode":
            value = coerce_enum(FitMode, value, name)
        elif name == "scale":
            value = coerce_enum(ScaleMode, value, name)
        elif name == "format":
            value = coerce_enum(OutputFormat, value, name)
        elif name == "jpeg_quality":
            value = validate_quality(value)
        elif name == "background_color":
            value = parse_color(value)
        elif name == "ignore_icc":
            value = bool(value)
        super().__setattr__(name, value)

    @classmethod
    def from_query(cls, query: str) -> "Instructions":
        """Build instructions from a query string such as ``width=50&format=png``.

        Supports ``width``, ``height``, ``quality``, ``mode``, ``scale``,
        ``format``, ``bgcolor`` and ``ignoreicc``. Keys with non-numeric
        integer values are ignored; everything else is validated.
        """

        params = {k.lower(): v[-1] for k, v in parse_qs(query.lstrip("?")).items()}
        instructions = cls()

        def _int(key: str) -> Optional[int]:
            raw = params.get(key)
            if raw is None:
                return None
            try:
                return int(raw)
            except ValueError:
                return None

        for key, attr in (("width", "width"), ("height", "height"), ("quality", "jpeg_quality")):
            number = _int(key)
            if number is not None:
                setattr(instructions, attr, number)
        for key in ("mode", "scale", "format"):
            if params.get(key):
                setattr(instructions, key, params[key])
        if params.get("bgcolor"):
            instructions.background_color = params["bgcolor"]
        if params.get("ignoreicc", "").lower() == "true":
            instructions.ignore_icc = True
        return instructions
