import pytest

from nail_studio.models import (
    AccentNailConfig,
    BaseProduct,
    CustomArtworkRequest,
    EffectApplication,
    PredefinedArtwork,
    StudioStateError,
)
from nail_studio.serialization import configuration_from_payload
from nail_studio.studio import CustomStudio
from nail_studio.validation import validate_custom_order


def _designed_studio() -> CustomStudio:
    studio = CustomStudio()
    studio.set_base_product(BaseProduct(handle="blush-hour", title="Blush Hour", price=38))
    studio.set_shape("stiletto")
    studio.set_length("short")
    studio.apply_preset_palette("ocean-breeze")
    studio.set_has_accent_nails(True)
    studio.toggle_accent_nail(8)
    studio.toggle_accent_nail(1)
    studio.set_accent_config(8, AccentNailConfig(finish="matte", effects=["chrome"]))
    studio.add_effect(EffectApplication(effect="chrome", scope="accents-only", nails={8, 1}))
    studio.set_charm_tier("single-statement")
    studio.set_charm_preferences("gold stars")
    studio.add_predefined_artwork(PredefinedArtwork(type="simple-lines", nails={9, 0}))
    studio.set_custom_artwork(
        CustomArtworkRequest(description="tiny moons", inspiration_images=["https://img.example.com/moon.png"], nails={5})
    )
    studio.set_notes("for a wedding")
    return studio


def test_submission_payload_writes_sorted_index_arrays() -> None:
    payload = _designed_studio().submission_payload()

    assert payload["accent_nails"] == [{"index": 1}, {"index": 8, "finish": "matte", "effects": ["chrome"]}]
    assert payload["effects"] == [{"effect": "chrome", "scope": "accents-only", "nails": [1, 8]}]
    assert payload["artwork_selections"] == [
        {"type": "simple-lines", "nails": [0, 9]},
        {"type": "custom", "nails": [5]},
    ]
    assert payload["artwork_type"] == "both"
    assert payload["base_product_handle"] == "blush-hour"
    assert payload["inspiration_images"] == ["https://img.example.com/moon.png"]


def test_submission_payload_carries_price_and_quote_flag() -> None:
    studio = _designed_studio()
    payload = studio.submission_payload()
    breakdown = studio.price_breakdown()

    assert payload["estimated_price"] == breakdown.subtotal == 38 + 8 + 2 + 6 + 5 + 10
    assert payload["requires_quote"] is True


def test_submission_payload_passes_gateway_validation() -> None:
    order = validate_custom_order(_designed_studio().submission_payload())
    assert order["shape"] == "stiletto"
    assert order["charms_preferences"] == "gold stars"
    assert order["custom_artwork_description"] == "tiny moons"
    assert order["status"] == "pending"


def test_payload_round_trip_preserves_pricing() -> None:
    studio = _designed_studio()
    payload = studio.submission_payload()
    payload["base_product"] = {"handle": "blush-hour", "title": "Blush Hour", "price": 38}

    rebuilt = CustomStudio(configuration_from_payload(payload))
    assert rebuilt.price_breakdown() == studio.price_breakdown()
    assert rebuilt.configuration.accent_nails == {1, 8}
    assert rebuilt.configuration.nail_colors == studio.configuration.nail_colors


def test_from_payload_deduplicates_indices() -> None:
    configuration = configuration_from_payload(
        {
            "shape": "oval",
            "length": "long",
            "finish": "glossy",
            "accent_nails": [{"index": 3}, {"index": 3}, {"index": 4}],
            "effects": [{"effect": "glitter", "scope": "accents-only", "nails": [3, 3, 4]}],
        }
    )
    assert configuration.accent_nails == {3, 4}
    assert set(configuration.accent_configs) == {3, 4}
    assert configuration.has_accent_nails is True
    assert configuration.effects["glitter"].nails == {3, 4}


def test_from_payload_rejects_unknown_values() -> None:
    with pytest.raises(StudioStateError, match="shape"):
        configuration_from_payload({"shape": "hexagon"})
    with pytest.raises(StudioStateError, match="nail index"):
        configuration_from_payload({"accent_nails": [{"index": 12}]})
