"""Global configuration for the lightresize toolkit.

This module centralizes defaults and user-tunable settings for:
- encoding defaults (format, JPEG quality, background)
- resampling and stream buffering
- CLI behavior (overwrite policy, directory creation, log level)
- named size presets usable instead of explicit width/height

All values can be overridden via CLI flags or direct imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


# Supported file extensions for source images
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff", ".gif"}


# Named size presets by aspect ratio (width, height).
ACCEPTED_SHAPES: Dict[str, Tuple[int, int]] = {
    "1:1": (1024, 1024),
    # Portraits
    "3:4": (896, 1152),
    "9:16": (768, 1344),
    # Landscapes
    "4:3": (1152, 896),
    "16:9": (1344, 768),
    # Thumbnails
    "thumb": (160, 160),
    "small": (320, 240),
}


RESAMPLE_METHOD = "bicubic"  # one of {nearest, bilinear, bicubic, lanczos}


@dataclass
class Defaults:
    """Encoding and rendering defaults.

    Attributes
    ----------
    jpeg_quality
        JPEG quality used when none is given. 90 is a very good setting.
    output_format
        Output format name, ``jpeg`` or ``png``.
    resample
        Resampling method for rendering. One of: 'nearest', 'bilinear',
        'bicubic', 'lanczos'.
    chunk_size
        Buffer size in bytes used when copying streams.
    background_color
        Background fill; ``None`` means transparent (white for JPEG output).
    """

    jpeg_quality: int = 90
    output_format: str = "jpeg"
    resample: str = RESAMPLE_METHOD
    chunk_size: int = 0x1000
    background_color: Optional[str] = None


@dataclass
class Behavior:
    """CLI behavior toggles.

    Attributes
    ----------
    overwrite
        Whether to overwrite files in the output directory.
    create_parent_directory
        Create missing parent directories of destination paths.
    log_level
        Log level used by the CLI sink.
    """

    overwrite: bool = False
    create_parent_directory: bool = True
    log_level: str = "INFO"


@dataclass
class ProjectConfig:
    """Top-level configuration container.

    Attributes
    ----------
    defaults
        Encoding and rendering defaults.
    behavior
        Execution-time toggles.
    accepted_shapes
        Mapping from preset label to target resolution (width, height).
    """

    defaults: Defaults = field(default_factory=Defaults)
    behavior: Behavior = field(default_factory=Behavior)
    accepted_shapes: Dict[str, Tuple[int, int]] = field(
        default_factory=lambda: dict(ACCEPTED_SHAPES)
    )


# Default singleton-style config instance used by CLI unless overridden
CONFIG = ProjectConfig()
