from __future__ import annotations

from typing import Any

from .models import (
    AccentNailConfig,
    BaseProduct,
    ColorPalette,
    CustomArtworkRequest,
    EffectApplication,
    PredefinedArtwork,
    StudioConfiguration,
    StudioStateError,
    normalize_nails,
    require_choice,
    require_nail_index,
)
from .pricing import (
    ALL_NAILS,
    CHARM_PRICES,
    EFFECT_PRICES,
    EFFECT_SCOPES,
    FINISH_PRICES,
    LENGTH_PRICES,
    NAIL_ART_PRICES,
    RHINESTONE_PRICES,
    SHAPE_PRICES,
)
from .pricing_engine import compute_price_breakdown

CUSTOM_ARTWORK_SELECTION = "custom"


def configuration_to_payload(configuration: StudioConfiguration) -> dict[str, Any]:
    """Flatten a configuration into the order submission wire format.

    Index sets are written as sorted arrays. The estimated price and quote flag
    come from a fresh breakdown.
    """
    breakdown = compute_price_breakdown(configuration)
    custom = configuration.custom_artwork

    colors: dict[str, Any] = {}
    if configuration.color_palette is not None:
        colors["palette"] = {
            "name": configuration.color_palette.name,
            "colors": list(configuration.color_palette.colors),
        }
    nail_colors = {str(index): color for index, color in sorted(configuration.nail_colors.items()) if color}
    if nail_colors:
        colors["nailColors"] = nail_colors

    accent_nails = [
        _accent_entry(index, configuration.accent_configs.get(index)) for index in sorted(configuration.accent_nails)
    ]

    effects = []
    for application in configuration.effects.values():
        entry: dict[str, Any] = {"effect": application.effect, "scope": application.scope}
        if application.nails:
            entry["nails"] = sorted(application.nails)
        effects.append(entry)

    artwork_selections = [
        {"type": artwork.type, "nails": sorted(artwork.nails)}
        for artwork in configuration.predefined_artwork.values()
    ]
    if custom is not None:
        artwork_selections.append({"type": CUSTOM_ARTWORK_SELECTION, "nails": sorted(custom.nails)})

    images = list(configuration.inspiration_images)
    if custom is not None:
        images.extend(url for url in custom.inspiration_images if url not in images)

    return {
        "shape": configuration.shape,
        "length": configuration.length,
        "finish": configuration.base_finish,
        "colors": colors,
        "accent_nails": accent_nails,
        "effects": effects,
        "rhinestones_tier": configuration.rhinestone_tier,
        "charms_tier": configuration.charm_tier,
        "charms_preferences": configuration.charm_preferences or None,
        "artwork_type": _artwork_type(configuration),
        "artwork_selections": artwork_selections,
        "custom_artwork_description": custom.description if custom is not None else None,
        "inspiration_images": images,
        "estimated_price": breakdown.subtotal,
        "requires_quote": breakdown.has_quote_items,
        "notes": configuration.notes or None,
        "base_product_handle": configuration.base_product.handle if configuration.base_product else None,
    }


def configuration_from_payload(payload: dict[str, Any]) -> StudioConfiguration:
    """Rebuild a configuration from the wire format.

    Index arrays are deduplicated back into sets. A ``base_product`` object
    (handle, title, price) may be supplied since the submission format only
    carries the handle.
    """
    if not isinstance(payload, dict):
        raise StudioStateError("configuration payload must be an object")

    configuration = StudioConfiguration(
        shape=require_choice(payload.get("shape", "almond"), SHAPE_PRICES, "shape"),
        length=require_choice(payload.get("length", "medium"), LENGTH_PRICES, "length"),
        base_finish=require_choice(payload.get("finish", "glossy"), FINISH_PRICES, "finish"),
        rhinestone_tier=require_choice(payload.get("rhinestones_tier") or "none", RHINESTONE_PRICES, "rhinestone tier"),
        charm_tier=require_choice(payload.get("charms_tier") or "none", CHARM_PRICES, "charm tier"),
        charm_preferences=str(payload.get("charms_preferences") or ""),
        notes=str(payload.get("notes") or ""),
        inspiration_images=[str(url) for url in _list_field(payload, "inspiration_images")],
    )

    product = payload.get("base_product")
    if product is not None:
        if not isinstance(product, dict):
            raise StudioStateError("base_product must be an object")
        try:
            configuration.base_product = BaseProduct(
                handle=str(product["handle"]),
                title=str(product.get("title") or product["handle"]),
                price=float(product["price"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise StudioStateError("base_product requires a handle and a numeric price") from exc
        configuration.entry_mode = "from-product"

    _apply_colors(configuration, payload.get("colors"))

    for entry in _list_field(payload, "accent_nails"):
        if not isinstance(entry, dict):
            raise StudioStateError("accent nail entries must be objects")
        index = require_nail_index(entry.get("index"))
        finish = entry.get("finish")
        configuration.accent_nails.add(index)
        configuration.accent_configs[index] = AccentNailConfig(
            finish=require_choice(finish, FINISH_PRICES, "finish") if finish else None,
            color=entry.get("color") or None,
            effects=[require_choice(effect, EFFECT_PRICES, "effect") for effect in _list_field(entry, "effects")],
        )
    configuration.has_accent_nails = bool(configuration.accent_nails)

    for entry in _list_field(payload, "effects"):
        if not isinstance(entry, dict):
            raise StudioStateError("effect entries must be objects")
        effect = require_choice(entry.get("effect"), EFFECT_PRICES, "effect")
        nails = normalize_nails(entry.get("nails"))
        configuration.effects.pop(effect, None)
        configuration.effects[effect] = EffectApplication(
            effect=effect,
            scope=require_choice(entry.get("scope", "all"), EFFECT_SCOPES, "effect scope"),
            nails=nails or None,
        )

    custom_nails: set[int] | None = None
    for entry in _list_field(payload, "artwork_selections"):
        if not isinstance(entry, dict):
            raise StudioStateError("artwork selections must be objects")
        if entry.get("type") == CUSTOM_ARTWORK_SELECTION:
            custom_nails = normalize_nails(entry.get("nails"))
            continue
        art_type = require_choice(entry.get("type"), NAIL_ART_PRICES, "artwork type")
        nails = set(ALL_NAILS) if NAIL_ART_PRICES[art_type].mode == "per-set" else normalize_nails(entry.get("nails"))
        configuration.predefined_artwork.pop(art_type, None)
        configuration.predefined_artwork[art_type] = PredefinedArtwork(type=art_type, nails=nails)

    description = payload.get("custom_artwork_description")
    if description is not None or custom_nails is not None:
        configuration.custom_artwork = CustomArtworkRequest(
            description=str(description or ""),
            nails=custom_nails or set(),
        )

    return configuration


def _accent_entry(index: int, config: AccentNailConfig | None) -> dict[str, Any]:
    entry: dict[str, Any] = {"index": index}
    if config is None:
        return entry
    if config.finish:
        entry["finish"] = config.finish
    if config.color:
        entry["color"] = config.color
    if config.effects:
        entry["effects"] = list(config.effects)
    return entry


def _artwork_type(configuration: StudioConfiguration) -> str:
    has_predefined = bool(configuration.predefined_artwork)
    has_custom = configuration.custom_artwork is not None
    if has_predefined and has_custom:
        return "both"
    if has_predefined:
        return "predefined"
    if has_custom:
        return "custom"
    return "none"


def _list_field(payload: dict[str, Any], name: str) -> list[Any]:
    value = payload.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise StudioStateError(f"{name} must be an array")
    return value


def _apply_colors(configuration: StudioConfiguration, colors: Any) -> None:
    if colors is None:
        return
    if not isinstance(colors, dict):
        raise StudioStateError("colors must be an object")

    palette = colors.get("palette")
    if isinstance(palette, dict) and palette.get("colors"):
        configuration.color_palette = ColorPalette(
            name=str(palette.get("name") or "Custom"),
            colors=[str(color) for color in _list_field(palette, "colors")],
        )

    nail_colors = colors.get("nailColors") or {}
    if not isinstance(nail_colors, dict):
        raise StudioStateError("colors.nailColors must be an object")
    for key, color in nail_colors.items():
        try:
            index = int(key)
        except (TypeError, ValueError) as exc:
            raise StudioStateError(f"nail color slot must be numeric, got {key!r}") from exc
        configuration.nail_colors[require_nail_index(index)] = str(color or "")
