from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .pricing import (
    NAIL_COUNT,
    CharmTier,
    EffectScope,
    EffectType,
    EntryMode,
    FinishType,
    LengthType,
    NailArtType,
    RhinestoneTier,
    ShapeType,
)


class StudioStateError(ValueError):
    """Raised when a studio mutation would break a configuration invariant."""


@dataclass(slots=True, frozen=True)
class BaseProduct:
    """Catalog item a design can be seeded from. Read-only once fetched."""

    handle: str
    title: str
    price: float


@dataclass(slots=True)
class ColorPalette:
    name: str
    colors: list[str]


@dataclass(slots=True)
class AccentNailConfig:
    finish: FinishType | None = None
    color: str | None = None
    effects: list[EffectType] = field(default_factory=list)


@dataclass(slots=True)
class EffectApplication:
    effect: EffectType
    scope: EffectScope = "all"
    nails: set[int] | None = None


@dataclass(slots=True)
class PredefinedArtwork:
    type: NailArtType
    nails: set[int] = field(default_factory=set)


@dataclass(slots=True)
class CustomArtworkRequest:
    description: str = ""
    inspiration_images: list[str] = field(default_factory=list)
    nails: set[int] = field(default_factory=set)


def _blank_nail_colors() -> dict[int, str]:
    return {index: "" for index in range(NAIL_COUNT)}


@dataclass(slots=True)
class StudioConfiguration:
    """The set being designed in one studio session.

    ``effects`` and ``predefined_artwork`` are keyed by effect kind and artwork
    type so at most one entry per key can exist. ``accent_configs`` keys always
    equal ``accent_nails``.
    """

    current_step: int = 0
    entry_mode: EntryMode = "fresh"
    base_product: BaseProduct | None = None
    shape: ShapeType = "almond"
    length: LengthType = "medium"
    base_finish: FinishType = "glossy"
    color_palette: ColorPalette | None = None
    nail_colors: dict[int, str] = field(default_factory=_blank_nail_colors)
    has_accent_nails: bool = False
    accent_nails: set[int] = field(default_factory=set)
    accent_configs: dict[int, AccentNailConfig] = field(default_factory=dict)
    effects: dict[EffectType, EffectApplication] = field(default_factory=dict)
    rhinestone_tier: RhinestoneTier = "none"
    charm_tier: CharmTier = "none"
    charm_preferences: str = ""
    predefined_artwork: dict[NailArtType, PredefinedArtwork] = field(default_factory=dict)
    custom_artwork: CustomArtworkRequest | None = None
    notes: str = ""
    inspiration_images: list[str] = field(default_factory=list)


def require_choice(value: Any, choices: Iterable[str], field_name: str) -> str:
    allowed = tuple(choices)
    if not isinstance(value, str) or value not in allowed:
        raise StudioStateError(f"unknown {field_name}: {value!r} (expected one of {', '.join(allowed)})")
    return value


def require_nail_index(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < NAIL_COUNT:
        raise StudioStateError(f"nail index must be an integer in 0..{NAIL_COUNT - 1}, got {value!r}")
    return value


def normalize_nails(nails: Iterable[Any] | None) -> set[int]:
    """Validate nail indices and collapse duplicates into a fresh set."""
    if nails is None:
        return set()
    if not isinstance(nails, (list, tuple, set, frozenset)):
        raise StudioStateError(f"nails must be an array of indices, got {nails!r}")
    return {require_nail_index(index) for index in nails}
