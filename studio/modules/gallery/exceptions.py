"""Gallery errors."""


class GalleryError(Exception):
    """Base class for gallery errors."""


class GalleryImageNotFoundError(GalleryError):
    """Raised when an image id is unknown or belongs to someone else."""
