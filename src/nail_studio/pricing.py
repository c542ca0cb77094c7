from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# All prices in USD.

EntryMode = Literal["fresh", "from-product"]
ShapeType = Literal["almond", "square", "oval", "coffin", "stiletto"]
LengthType = Literal["short", "medium", "long", "extra-long"]
FinishType = Literal["glossy", "matte"]
EffectType = Literal["chrome", "glitter", "french-tip"]
EffectScope = Literal["all", "accents-only"]
RhinestoneTier = Literal["none", "just-a-touch", "a-little-sparkle", "full-glam"]
CharmTier = Literal["none", "single-statement", "a-few-accents", "charmed-out"]
NailArtType = Literal["simple-lines", "florals", "abstract", "themed-set"]

ENTRY_MODES: tuple[str, ...] = ("fresh", "from-product")
EFFECT_SCOPES: tuple[str, ...] = ("all", "accents-only")

SHAPE_PRICES: dict[str, float] = {
    "almond": 0,
    "square": 0,
    "oval": 0,
    "coffin": 5,
    "stiletto": 8,
}

LENGTH_PRICES: dict[str, float] = {
    "short": 0,
    "medium": 5,
    "long": 10,
    "extra-long": 15,
}

FINISH_PRICES: dict[str, float] = {
    "glossy": 0,
    "matte": 5,
}


@dataclass(slots=True, frozen=True)
class EffectPrice:
    all_nails: float
    per_nail: float


EFFECT_PRICES: dict[str, EffectPrice] = {
    "chrome": EffectPrice(all_nails=15, per_nail=3),
    "glitter": EffectPrice(all_nails=12, per_nail=2),
    "french-tip": EffectPrice(all_nails=10, per_nail=2),
}

# Tiers are ordered none < low < mid < high and priced flat, never summed.
RHINESTONE_PRICES: dict[str, float] = {
    "none": 0,
    "just-a-touch": 3,
    "a-little-sparkle": 8,
    "full-glam": 18,
}

CHARM_PRICES: dict[str, float] = {
    "none": 0,
    "single-statement": 5,
    "a-few-accents": 12,
    "charmed-out": 20,
}


@dataclass(slots=True, frozen=True)
class NailArtPrice:
    mode: Literal["per-nail", "per-set"]
    price: float


NAIL_ART_PRICES: dict[str, NailArtPrice] = {
    "simple-lines": NailArtPrice(mode="per-nail", price=5),
    "florals": NailArtPrice(mode="per-nail", price=8),
    "abstract": NailArtPrice(mode="per-nail", price=8),
    "themed-set": NailArtPrice(mode="per-set", price=25),
}

ACCENT_FINISH_CHANGE_PRICE: float = 2
BASE_CUSTOM_SET_PRICE: float = 35

SHAPE_LABELS = {
    "almond": "Almond",
    "square": "Square",
    "oval": "Oval",
    "coffin": "Coffin",
    "stiletto": "Stiletto",
}

LENGTH_LABELS = {
    "short": "Short",
    "medium": "Medium",
    "long": "Long",
    "extra-long": "Extra Long",
}

FINISH_LABELS = {"glossy": "Glossy", "matte": "Matte"}

EFFECT_LABELS = {"chrome": "Chrome", "glitter": "Glitter", "french-tip": "French Tip"}

RHINESTONE_LABELS = {
    "none": "None",
    "just-a-touch": "Just a Touch",
    "a-little-sparkle": "A Little Sparkle",
    "full-glam": "Full Glam",
}

CHARM_LABELS = {
    "none": "None",
    "single-statement": "Single Statement",
    "a-few-accents": "A Few Accents",
    "charmed-out": "Charmed Out",
}

NAIL_ART_LABELS = {
    "simple-lines": "Simple Lines",
    "florals": "Florals",
    "abstract": "Abstract",
    "themed-set": "Themed Set",
}

# Fixed anatomical order, left pinky through right pinky.
FINGER_NAMES: tuple[str, ...] = (
    "Left Pinky",
    "Left Ring",
    "Left Middle",
    "Left Index",
    "Left Thumb",
    "Right Thumb",
    "Right Index",
    "Right Middle",
    "Right Ring",
    "Right Pinky",
)
NAIL_COUNT = len(FINGER_NAMES)
ALL_NAILS: frozenset[int] = frozenset(range(NAIL_COUNT))


@dataclass(slots=True, frozen=True)
class PresetPalette:
    id: str
    name: str
    description: str
    colors: tuple[str, ...]


COLOR_PALETTES: tuple[PresetPalette, ...] = (
    PresetPalette(
        id="bridal-blush",
        name="Bridal Blush",
        description="Soft, romantic tones perfect for your special day",
        colors=("#F8E8E0", "#E8D4C4", "#D4B8A8", "#C9A89A"),
    ),
    PresetPalette(
        id="midnight-glam",
        name="Midnight Glam",
        description="Bold, sultry shades for evening elegance",
        colors=("#1A1A2E", "#4A4E69", "#9A8C98"),
    ),
    PresetPalette(
        id="french-romance",
        name="French Romance",
        description="Classic French manicure inspired palette",
        colors=("#FDF5E6", "#FFE4E1", "#FFFFFF"),
    ),
    PresetPalette(
        id="bold-beautiful",
        name="Bold & Beautiful",
        description="Vibrant, statement-making colors",
        colors=("#C41E3A", "#FF6B6B", "#FFD93D", "#6BCB77"),
    ),
    PresetPalette(
        id="ocean-breeze",
        name="Ocean Breeze",
        description="Calming coastal-inspired hues",
        colors=("#A8D8EA", "#AA96DA", "#FCBAD3"),
    ),
)


def find_palette(palette_id: str) -> PresetPalette | None:
    for palette in COLOR_PALETTES:
        if palette.id == palette_id:
            return palette
    return None


def pricing_catalog() -> dict[str, object]:
    """Price tables, labels and presets in a JSON-friendly shape."""
    return {
        "base_custom_set_price": BASE_CUSTOM_SET_PRICE,
        "accent_finish_change_price": ACCENT_FINISH_CHANGE_PRICE,
        "shapes": {key: {"label": SHAPE_LABELS[key], "price": price} for key, price in SHAPE_PRICES.items()},
        "lengths": {key: {"label": LENGTH_LABELS[key], "price": price} for key, price in LENGTH_PRICES.items()},
        "finishes": {key: {"label": FINISH_LABELS[key], "price": price} for key, price in FINISH_PRICES.items()},
        "effects": {
            key: {"label": EFFECT_LABELS[key], "all_nails": price.all_nails, "per_nail": price.per_nail}
            for key, price in EFFECT_PRICES.items()
        },
        "effect_scopes": list(EFFECT_SCOPES),
        "rhinestone_tiers": {
            key: {"label": RHINESTONE_LABELS[key], "price": price} for key, price in RHINESTONE_PRICES.items()
        },
        "charm_tiers": {key: {"label": CHARM_LABELS[key], "price": price} for key, price in CHARM_PRICES.items()},
        "nail_art": {
            key: {"label": NAIL_ART_LABELS[key], "mode": price.mode, "price": price.price}
            for key, price in NAIL_ART_PRICES.items()
        },
        "fingers": list(FINGER_NAMES),
        "palettes": [
            {"id": palette.id, "name": palette.name, "description": palette.description, "colors": list(palette.colors)}
            for palette in COLOR_PALETTES
        ],
    }
