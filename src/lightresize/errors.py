"""Exception taxonomy for lightresize."""

from __future__ import annotations


class LightResizeError(Exception):
    """Base class for errors raised by this package."""


class ValidationError(LightResizeError, ValueError):
    """Resize instructions or arguments are out of range.

    Raised eagerly when a value is assigned, never deferred to build time.
    """


class DecodeError(LightResizeError, OSError):
    """The source stream could not be decoded as an image."""
