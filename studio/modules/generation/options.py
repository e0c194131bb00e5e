"""Photo settings and the instruction they produce.

Each option is a small tagged variant. :func:`build_instruction` maps every
variant to exactly one clause and refuses unknown variants, so a new option
cannot silently yield an empty or malformed instruction.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

MAX_DIMENSION = 4096


class BackgroundColor(str, Enum):
    WHITE = "#ffffff"
    LIGHT_BLUE = "#ADD8E6"
    BLUE = "#007bff"
    GREY = "#D3D3D3"
    OFF_WHITE = "#f8f9fa"


class Garment(str, Enum):
    # men
    FORMAL_SUIT_BLACK = "black formal suit and tie"
    FORMAL_SUIT_NAVY = "navy blue formal suit and tie"
    FORMAL_SUIT_GREY = "grey formal suit and tie"
    WHITE_SHIRT = "formal white button-down shirt"
    BLUE_SHIRT = "formal light blue button-down shirt"
    CHECKERED_SHIRT = "formal checkered button-down shirt"
    POLO_SHIRT = "navy blue polo shirt"
    PANJABI = "white traditional bengali panjabi"
    BLACK_PANJABI = "black traditional bengali panjabi"
    JUBBA = "white islamic thobe"
    SHERWANI = "formal traditional sherwani"
    # school boys
    SCHOOL_SHIRT_WHITE = "white school uniform shirt"
    # women
    SAREE = "formal saree"
    SALWAR_KAMEEZ = "formal salwar kameez"
    WOMEN_BLAZER = "black formal blazer for women"
    WOMEN_WHITE_SHIRT = "white formal shirt for women"
    HIJAB = "black hijab with modest dress"
    ABAYA = "black abaya"
    KURTI = "simple elegant kurti"
    # school girls
    SCHOOL_UNIFORM_WHITE = "white school uniform salwar kameez"
    SCHOOL_UNIFORM_GREEN = "bottle green school uniform salwar kameez"
    SCHOOL_UNIFORM_BLUE = "blue school uniform salwar kameez"


@dataclass(frozen=True, slots=True)
class OriginalClothing:
    pass


@dataclass(frozen=True, slots=True)
class PresetClothing:
    garment: Garment


@dataclass(frozen=True, slots=True)
class CustomClothing:
    description: str

    def __post_init__(self) -> None:
        if not self.description.strip():
            raise ValueError("custom clothing needs a description")


Clothing = Union[OriginalClothing, PresetClothing, CustomClothing]


@dataclass(frozen=True, slots=True)
class Retouch:
    enabled: bool = False
    intensity: int = 50

    def __post_init__(self) -> None:
        if not 0 <= self.intensity <= 100:
            raise ValueError("intensity must be between 0 and 100")


@dataclass(frozen=True, slots=True)
class PassportSize:
    width: int = 472
    height: int = 591


@dataclass(frozen=True, slots=True)
class SquareSize:
    width: int = 300
    height: int = 300


@dataclass(frozen=True, slots=True)
class CustomSize:
    width: int
    height: int

    def __post_init__(self) -> None:
        if not (1 <= self.width <= MAX_DIMENSION and 1 <= self.height <= MAX_DIMENSION):
            raise ValueError(f"custom size must be within 1..{MAX_DIMENSION} pixels")


OutputSize = Union[PassportSize, SquareSize, CustomSize]

# ratios the image model accepts for its output frame
SUPPORTED_ASPECT_RATIOS = ("1:1", "2:3", "3:2", "3:4", "4:3", "4:5", "5:4", "9:16", "16:9", "21:9")


@dataclass(frozen=True, slots=True)
class PhotoOptions:
    background: BackgroundColor = BackgroundColor.WHITE
    clothing: Clothing = field(default_factory=OriginalClothing)
    skin_smoothing: Retouch = field(default_factory=Retouch)
    lighting: Retouch = field(default_factory=Retouch)
    brightening: Retouch = field(default_factory=Retouch)
    size: OutputSize = field(default_factory=PassportSize)


def clothing_clause(clothing: Clothing) -> str:
    if isinstance(clothing, OriginalClothing):
        return "Keep original clothing."
    if isinstance(clothing, PresetClothing):
        description = clothing.garment.value
    elif isinstance(clothing, CustomClothing):
        description = clothing.description.strip()
    else:
        raise TypeError(f"unsupported clothing option: {clothing!r}")
    return (
        f"Change clothing to: {description}. "
        "Ensure the clothing fits naturally and looks professional."
    )


def skin_clause(retouch: Retouch) -> str:
    if retouch.enabled:
        return f"Apply subtle skin smoothing ({retouch.intensity}% intensity) to reduce noise."
    return "Keep skin texture natural."


def lighting_clause(retouch: Retouch) -> str:
    if retouch.enabled:
        return f"Balance the lighting for a studio look ({retouch.intensity}% intensity)."
    return "Keep original lighting."


def brightening_clause(retouch: Retouch) -> str | None:
    if not retouch.enabled:
        return None
    return (
        f"Slightly brighten the face ({retouch.intensity}% intensity) "
        "to improve visibility, but keep it natural."
    )


def size_dimensions(size: OutputSize) -> tuple[int, int]:
    if isinstance(size, (PassportSize, SquareSize, CustomSize)):
        return size.width, size.height
    raise TypeError(f"unsupported output size: {size!r}")


def size_label(size: OutputSize) -> str:
    if isinstance(size, PassportSize):
        return "passport"
    if isinstance(size, SquareSize):
        return f"{size.width}x{size.height}"
    if isinstance(size, CustomSize):
        return "custom"
    raise TypeError(f"unsupported output size: {size!r}")


def aspect_ratio_for(size: OutputSize) -> str:
    if isinstance(size, PassportSize):
        return "3:4"
    if isinstance(size, SquareSize):
        return "1:1"
    width, height = size_dimensions(size)
    target = math.log(width / height)

    def distance(ratio: str) -> float:
        w, h = (int(part) for part in ratio.split(":"))
        return abs(math.log(w / h) - target)

    return min(SUPPORTED_ASPECT_RATIOS, key=distance)


def settings_summary(options: PhotoOptions) -> str:
    return f"{size_label(options.size)}, {options.background.value}"


def build_instruction(options: PhotoOptions) -> str:
    clauses = [
        f"Background: Change background to a solid {options.background.value} color.",
        f"Clothing: {clothing_clause(options.clothing)}",
        f"Face: {skin_clause(options.skin_smoothing)}",
        f"Lighting: {lighting_clause(options.lighting)}",
    ]
    brightening = brightening_clause(options.brightening)
    if brightening:
        clauses.append(f"Brightness: {brightening}")

    lines = [
        "Transform this image into a professional passport photo.",
        "",
        "STRICT INSTRUCTIONS:",
    ]
    lines.extend(f"{index}. {clause}" for index, clause in enumerate(clauses, start=1))
    lines.extend(
        [
            "",
            "NEGATIVE CONSTRAINTS (CRITICAL):",
            "- DO NOT add any text, code, overlay, numbers, or watermarks on the image.",
            "- DO NOT change the person's identity or facial features.",
            "- DO NOT distort the face.",
            "- Output MUST be a clean photo only.",
        ]
    )
    return "\n".join(lines)
