from __future__ import annotations

import logging
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
    ENTRY_MODES,
    FINISH_PRICES,
    LENGTH_PRICES,
    NAIL_ART_PRICES,
    NAIL_COUNT,
    RHINESTONE_PRICES,
    SHAPE_PRICES,
    CharmTier,
    EffectScope,
    EffectType,
    EntryMode,
    FinishType,
    LengthType,
    NailArtType,
    RhinestoneTier,
    ShapeType,
    find_palette,
)
from .pricing_engine import PriceBreakdown, compute_price_breakdown
from .serialization import configuration_to_payload

STEP_NAMES: tuple[str, ...] = (
    "Starting Point",
    "Base Look",
    "Accent Nails",
    "Effects & Add-ons",
    "Custom Artwork",
    "Review & Submit",
)
LAST_STEP = len(STEP_NAMES) - 1

logger = logging.getLogger(__name__)


class CustomStudio:
    """State container for one design session.

    Every mutation goes through a method here so the configuration invariants
    hold after each call. Construct one per session and pass it to whatever
    needs to read or change the design.
    """

    def __init__(self, configuration: StudioConfiguration | None = None) -> None:
        self.configuration = configuration if configuration is not None else StudioConfiguration()

    # Navigation

    @property
    def current_step(self) -> int:
        return self.configuration.current_step

    @property
    def step_name(self) -> str:
        return STEP_NAMES[self.configuration.current_step]

    def can_proceed(self) -> bool:
        config = self.configuration
        step = config.current_step
        if step == 0:
            return config.entry_mode == "fresh" or config.base_product is not None
        if step == 1:
            return bool(config.shape and config.length and config.base_finish)
        if step == 2:
            return not config.has_accent_nails or len(config.accent_nails) > 0
        # Effects, artwork and review are optional.
        return 3 <= step <= LAST_STEP

    def next_step(self) -> None:
        if self.can_proceed() and self.configuration.current_step < LAST_STEP:
            self.configuration.current_step += 1
            logger.debug("studio_step_changed", extra={"step": self.configuration.current_step, "direction": "next"})

    def prev_step(self) -> None:
        if self.configuration.current_step > 0:
            self.configuration.current_step -= 1
            logger.debug("studio_step_changed", extra={"step": self.configuration.current_step, "direction": "prev"})

    def set_step(self, step: int) -> None:
        """Jump directly to a step, clamped to the sequence. Not gated."""
        self.configuration.current_step = max(0, min(LAST_STEP, int(step)))

    # Starting point

    def set_entry_mode(self, mode: EntryMode) -> None:
        self.configuration.entry_mode = require_choice(mode, ENTRY_MODES, "entry mode")

    def set_base_product(self, product: BaseProduct | None) -> None:
        self.configuration.base_product = product
        self.configuration.entry_mode = "from-product" if product is not None else "fresh"

    # Base look

    def set_shape(self, shape: ShapeType) -> None:
        self.configuration.shape = require_choice(shape, SHAPE_PRICES, "shape")

    def set_length(self, length: LengthType) -> None:
        self.configuration.length = require_choice(length, LENGTH_PRICES, "length")

    def set_base_finish(self, finish: FinishType) -> None:
        self.configuration.base_finish = require_choice(finish, FINISH_PRICES, "finish")

    def set_color_palette(self, palette: ColorPalette | None) -> None:
        """Select a palette and paint every slot with it, cycling its colors."""
        if palette is None:
            self.configuration.color_palette = None
            return
        if not palette.colors:
            raise StudioStateError("palette must contain at least one color")
        self.configuration.color_palette = ColorPalette(name=palette.name, colors=list(palette.colors))
        for index in range(NAIL_COUNT):
            self.set_nail_color(index, palette.colors[index % len(palette.colors)])

    def apply_preset_palette(self, palette_id: str) -> None:
        preset = find_palette(palette_id)
        if preset is None:
            raise StudioStateError(f"unknown palette: {palette_id!r}")
        self.set_color_palette(ColorPalette(name=preset.name, colors=list(preset.colors)))

    def set_nail_color(self, index: int, color: str) -> None:
        self.configuration.nail_colors[require_nail_index(index)] = color

    # Accent nails

    def set_has_accent_nails(self, has_accent_nails: bool) -> None:
        config = self.configuration
        config.has_accent_nails = bool(has_accent_nails)
        if not config.has_accent_nails:
            config.accent_nails = set()
            config.accent_configs = {}

    def toggle_accent_nail(self, index: int) -> None:
        index = require_nail_index(index)
        config = self.configuration
        accent_nails = set(config.accent_nails)
        accent_configs = dict(config.accent_configs)
        if index in accent_nails:
            accent_nails.discard(index)
            accent_configs.pop(index, None)
        else:
            accent_nails.add(index)
            accent_configs[index] = AccentNailConfig()
        config.accent_nails = accent_nails
        config.accent_configs = accent_configs

    def set_accent_config(self, index: int, accent: AccentNailConfig) -> None:
        index = require_nail_index(index)
        if index not in self.configuration.accent_nails:
            raise StudioStateError(f"nail {index} is not an accent nail")
        self.configuration.accent_configs[index] = AccentNailConfig(
            finish=require_choice(accent.finish, FINISH_PRICES, "finish") if accent.finish else None,
            color=accent.color,
            effects=[require_choice(effect, EFFECT_PRICES, "effect") for effect in accent.effects],
        )

    # Effects and add-ons

    def add_effect(self, application: EffectApplication) -> None:
        """Add an effect, replacing any existing application of the same kind."""
        effect = require_choice(application.effect, EFFECT_PRICES, "effect")
        entry = EffectApplication(
            effect=effect,
            scope=require_choice(application.scope, EFFECT_SCOPES, "effect scope"),
            nails=normalize_nails(application.nails) if application.nails is not None else None,
        )
        self.configuration.effects.pop(effect, None)
        self.configuration.effects[effect] = entry

    def remove_effect(self, effect: EffectType) -> None:
        self.configuration.effects.pop(effect, None)

    def update_effect_scope(self, effect: EffectType, scope: EffectScope) -> None:
        scope = require_choice(scope, EFFECT_SCOPES, "effect scope")
        application = self.configuration.effects.get(effect)
        if application is not None:
            application.scope = scope

    def set_rhinestone_tier(self, tier: RhinestoneTier) -> None:
        self.configuration.rhinestone_tier = require_choice(tier, RHINESTONE_PRICES, "rhinestone tier")

    def set_charm_tier(self, tier: CharmTier) -> None:
        self.configuration.charm_tier = require_choice(tier, CHARM_PRICES, "charm tier")

    def set_charm_preferences(self, preferences: str) -> None:
        self.configuration.charm_preferences = preferences

    # Artwork

    def add_predefined_artwork(self, artwork: PredefinedArtwork) -> None:
        art_type = require_choice(artwork.type, NAIL_ART_PRICES, "artwork type")
        if NAIL_ART_PRICES[art_type].mode == "per-set":
            nails = set(ALL_NAILS)
        else:
            nails = normalize_nails(artwork.nails)
        self.configuration.predefined_artwork.pop(art_type, None)
        self.configuration.predefined_artwork[art_type] = PredefinedArtwork(type=art_type, nails=nails)

    def remove_predefined_artwork(self, art_type: NailArtType) -> None:
        self.configuration.predefined_artwork.pop(art_type, None)

    def set_custom_artwork(self, request: CustomArtworkRequest | None) -> None:
        if request is None:
            self.configuration.custom_artwork = None
            return
        self.configuration.custom_artwork = CustomArtworkRequest(
            description=request.description,
            inspiration_images=list(request.inspiration_images),
            nails=normalize_nails(request.nails),
        )

    # General

    def set_notes(self, notes: str) -> None:
        self.configuration.notes = notes

    def add_inspiration_image(self, url: str) -> None:
        self.configuration.inspiration_images.append(url)

    def remove_inspiration_image(self, url: str) -> None:
        self.configuration.inspiration_images = [image for image in self.configuration.inspiration_images if image != url]

    # Pricing and submission

    def price_breakdown(self) -> PriceBreakdown:
        return compute_price_breakdown(self.configuration)

    def submission_payload(self) -> dict[str, Any]:
        return configuration_to_payload(self.configuration)

    def reset_studio(self) -> None:
        self.configuration = StudioConfiguration()
        logger.debug("studio_reset")
