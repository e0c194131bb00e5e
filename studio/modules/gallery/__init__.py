"""Gallery domain exports"""

from .exceptions import GalleryError, GalleryImageNotFoundError
from .models import GalleryFilter, GalleryImage

__all__ = [
    "GalleryError",
    "GalleryImageNotFoundError",
    "GalleryFilter",
    "GalleryImage",
]
