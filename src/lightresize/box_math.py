"""Size and rectangle types plus the pure geometry used by the layout engine.

Rounding uses Python's built-in ``round()``, i.e. round half to even
("banker's rounding"): ``round(0.5) == 0`` and ``round(1.5) == 2``. Layout
results are pixel exact only with respect to that rule.
"""

from __future__ import annotations

from typing import NamedTuple, Union


class Size(NamedTuple):
    width: int
    height: int


class SizeF(NamedTuple):
    width: float
    height: float


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


class RectF(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def size(self) -> SizeF:
        return SizeF(self.width, self.height)

    @classmethod
    def from_size(cls, size: Union[Size, SizeF]) -> "RectF":
        """Rectangle of ``size`` anchored at the origin."""
        return cls(0.0, 0.0, float(size[0]), float(size[1]))


AnySize = Union[Size, SizeF]


def scale_inside(inner: AnySize, bounding: AnySize) -> SizeF:
    """Scale ``inner`` to the largest size with its aspect ratio inside ``bounding``.

    Parameters
    ----------
    inner
        Size whose aspect ratio is preserved.
    bounding
        Box the result must fit in.

    Returns
    -------
    SizeF
        If ``bounding`` is relatively wider than ``inner`` the height binds,
        otherwise (narrower or identical ratios) the width binds.
    """

    inner_ratio = inner[0] / inner[1]
    outer_ratio = bounding[0] / bounding[1]

    if outer_ratio > inner_ratio:
        # Bounding box is wider: bound by height
        return SizeF(inner_ratio * bounding[1], float(bounding[1]))
    # Bounding box is taller, or the ratios are identical
    return SizeF(float(bounding[0]), bounding[0] / inner_ratio)


def fits_inside(inner: AnySize, outer: AnySize) -> bool:
    """Return True if neither dimension of ``inner`` exceeds ``outer``."""
    return inner[0] <= outer[0] and inner[1] <= outer[1]


def center_inside(size: AnySize, bounds: RectF) -> RectF:
    """Center a rectangle of ``size`` on the center of ``bounds`` (no rounding)."""
    return RectF(
        bounds.width / 2 + bounds.x - size[0] / 2,
        bounds.height / 2 + bounds.y - size[1] / 2,
        float(size[0]),
        float(size[1]),
    )


def round_size(size: AnySize) -> Size:
    return Size(int(round(size[0])), int(round(size[1])))


def round_rect(rect: RectF) -> Rect:
    return Rect(
        int(round(rect.x)),
        int(round(rect.y)),
        int(round(rect.width)),
        int(round(rect.height)),
    )
