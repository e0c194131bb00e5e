import pytest

from studio.modules.generation.options import (
    BackgroundColor,
    CustomClothing,
    CustomSize,
    Garment,
    PassportSize,
    PhotoOptions,
    PresetClothing,
    Retouch,
    SquareSize,
    aspect_ratio_for,
    build_instruction,
    settings_summary,
    size_dimensions,
)


def test_default_instruction_keeps_everything_original():
    instruction = build_instruction(PhotoOptions())

    assert "1. Background: Change background to a solid #ffffff color." in instruction
    assert "2. Clothing: Keep original clothing." in instruction
    assert "3. Face: Keep skin texture natural." in instruction
    assert "4. Lighting: Keep original lighting." in instruction
    assert "5." not in instruction
    assert "DO NOT add any text, code, overlay, numbers, or watermarks on the image." in instruction


def test_every_option_maps_to_its_clause():
    options = PhotoOptions(
        background=BackgroundColor.LIGHT_BLUE,
        clothing=PresetClothing(Garment.PANJABI),
        skin_smoothing=Retouch(enabled=True, intensity=40),
        lighting=Retouch(enabled=True, intensity=70),
        brightening=Retouch(enabled=True, intensity=25),
    )
    instruction = build_instruction(options)

    assert "#ADD8E6" in instruction
    assert "Change clothing to: white traditional bengali panjabi." in instruction
    assert "skin smoothing (40% intensity)" in instruction
    assert "studio look (70% intensity)" in instruction
    assert "5. Brightness: Slightly brighten the face (25% intensity)" in instruction


def test_custom_clothing_uses_description():
    instruction = build_instruction(PhotoOptions(clothing=CustomClothing("  maroon kurta ")))
    assert "Change clothing to: maroon kurta." in instruction

    with pytest.raises(ValueError):
        CustomClothing("   ")


def test_unknown_clothing_variant_is_rejected():
    with pytest.raises(TypeError):
        build_instruction(PhotoOptions(clothing="tuxedo"))


def test_retouch_intensity_bounds():
    with pytest.raises(ValueError):
        Retouch(enabled=True, intensity=101)


@pytest.mark.parametrize(
    "size, ratio",
    [
        (PassportSize(), "3:4"),
        (SquareSize(), "1:1"),
        (CustomSize(600, 600), "1:1"),
        (CustomSize(1920, 1080), "16:9"),
        (CustomSize(600, 800), "3:4"),
        (CustomSize(350, 450), "4:5"),
        (CustomSize(400, 600), "2:3"),
    ],
)
def test_aspect_ratio_for_sizes(size, ratio):
    assert aspect_ratio_for(size) == ratio


def test_size_dimensions_and_summary():
    assert size_dimensions(PassportSize()) == (472, 591)
    assert size_dimensions(SquareSize()) == (300, 300)
    assert settings_summary(PhotoOptions()) == "passport, #ffffff"
    assert settings_summary(PhotoOptions(size=SquareSize(), background=BackgroundColor.BLUE)) == "300x300, #007bff"

    with pytest.raises(ValueError):
        CustomSize(0, 100)
