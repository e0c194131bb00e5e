"""Pillow helpers for data URLs, the crop viewport and output resizing."""

from __future__ import annotations

import base64
import binascii
import io
import math
import re
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from .exceptions import InvalidImageError

DEFAULT_MIME_TYPE = "image/jpeg"
_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?:;[^,]*)?,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True, slots=True)
class ViewportTransform:
    """Pan/zoom/rotate applied by the user over the cover-fitted preview.

    ``translate_x``/``translate_y`` are in container pixels, ``rotation`` in
    degrees clockwise.
    """

    container_width: float
    container_height: float
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0

    def __post_init__(self) -> None:
        if self.container_width <= 0 or self.container_height <= 0:
            raise ValueError("container dimensions must be positive")
        if self.scale <= 0:
            raise ValueError("scale must be positive")


def split_data_url(value: str) -> tuple[str, bytes]:
    """Return ``(mime_type, raw_bytes)`` for a data URL or bare base64 payload."""
    value = value.strip()
    mime_type = DEFAULT_MIME_TYPE
    payload = value
    match = _DATA_URL_RE.match(value)
    if match:
        mime_type = match.group("mime") or DEFAULT_MIME_TYPE
        payload = match.group("data")
    try:
        raw = base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageError("image is not valid base64") from exc
    if not raw:
        raise InvalidImageError("image is empty")
    return mime_type, raw


def to_data_url(raw: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


def open_image(raw: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidImageError("could not decode image") from exc
    return image.convert("RGB")


def encode_jpeg(image: Image.Image, quality: int = 95) -> bytes:
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def render_viewport(image: Image.Image, transform: ViewportTransform, target_width: int = 800) -> Image.Image:
    """Render what the crop viewport shows onto a white canvas.

    The canvas keeps the container's aspect ratio and is ``target_width``
    pixels wide. The image is first scaled to cover the container, then
    panned, zoomed and rotated about the canvas center.
    """
    cw, ch = transform.container_width, transform.container_height
    iw, ih = image.size
    target_height = max(1, round(target_width * ch / cw))
    dom_scale = target_width / cw

    if cw / ch > iw / ih:
        cover = cw / iw
    else:
        cover = ch / ih
    draw_scale = cover * dom_scale

    ox = target_width / 2 + transform.translate_x * dom_scale
    oy = target_height / 2 + transform.translate_y * dom_scale
    k = 1.0 / (transform.scale * draw_scale)
    theta = math.radians(transform.rotation)
    cos, sin = math.cos(theta), math.sin(theta)

    # inverse mapping: output pixel -> source pixel
    coefficients = (
        k * cos,
        k * sin,
        iw / 2 - k * (cos * ox + sin * oy),
        -k * sin,
        k * cos,
        ih / 2 - k * (-sin * ox + cos * oy),
    )
    return image.convert("RGB").transform(
        (target_width, target_height),
        Image.Transform.AFFINE,
        coefficients,
        resample=Image.Resampling.BICUBIC,
        fillcolor="white",
    )


def center_crop_resize(image: Image.Image, width: int, height: int) -> Image.Image:
    """Crop the largest centered region with the target ratio and scale it."""
    if image.size == (width, height):
        return image.copy()

    iw, ih = image.size
    target_ratio = width / height
    if iw / ih > target_ratio:
        sw, sh = ih * target_ratio, float(ih)
        sx, sy = (iw - sw) / 2, 0.0
    else:
        sw, sh = float(iw), iw / target_ratio
        sx, sy = 0.0, (ih - sh) / 2
    return image.resize(
        (width, height),
        Image.Resampling.LANCZOS,
        box=(sx, sy, sx + sw, sy + sh),
    )
