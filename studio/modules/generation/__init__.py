"""Photo generation: options, imaging helpers, model client and errors.

The paid workflow lives in ``studio.modules.generation.service``.
"""

from .exceptions import (
    GenerationEmpty,
    GenerationError,
    GenerationRefused,
    GenerationUnavailable,
    InvalidImageError,
)
from .options import (
    BackgroundColor,
    CustomClothing,
    CustomSize,
    Garment,
    OriginalClothing,
    PassportSize,
    PhotoOptions,
    PresetClothing,
    Retouch,
    SquareSize,
)

__all__ = [
    "BackgroundColor",
    "CustomClothing",
    "CustomSize",
    "Garment",
    "GenerationEmpty",
    "GenerationError",
    "GenerationRefused",
    "GenerationUnavailable",
    "InvalidImageError",
    "OriginalClothing",
    "PassportSize",
    "PhotoOptions",
    "PresetClothing",
    "Retouch",
    "SquareSize",
]
