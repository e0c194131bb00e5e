"""Generation errors surfaced to the caller as-is (no retries)."""


class GenerationError(Exception):
    """Base class for generation failures."""


class GenerationRefused(GenerationError):
    """The model answered with text only. ``excerpt`` holds at most 200 characters (+ "...")."""

    def __init__(self, excerpt: str) -> None:
        super().__init__(excerpt)
        self.excerpt = excerpt


class GenerationEmpty(GenerationError):
    """The model returned neither image bytes nor text."""

    def __init__(self) -> None:
        super().__init__("No image generated. Please try a different photo or setting.")


class GenerationUnavailable(GenerationError):
    """No API key is configured for the external model."""


class InvalidImageError(GenerationError):
    """The uploaded image could not be decoded."""
