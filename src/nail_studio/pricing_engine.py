from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import StudioConfiguration
from .pricing import (
    ACCENT_FINISH_CHANGE_PRICE,
    BASE_CUSTOM_SET_PRICE,
    CHARM_PRICES,
    EFFECT_PRICES,
    FINISH_PRICES,
    LENGTH_PRICES,
    NAIL_ART_PRICES,
    RHINESTONE_PRICES,
    SHAPE_PRICES,
)


@dataclass(slots=True, frozen=True)
class PriceLineItem:
    label: str
    amount: float
    is_quote_required: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "amount": self.amount, "is_quote_required": self.is_quote_required}


@dataclass(slots=True)
class PriceBreakdown:
    """Itemized estimate.

    ``subtotal`` is a floor whenever ``has_quote_items`` is set: quote-required
    lines contribute nothing to it.
    """

    items: list[PriceLineItem]
    subtotal: float
    has_quote_items: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "subtotal": self.subtotal,
            "has_quote_items": self.has_quote_items,
        }


def compute_price_breakdown(configuration: StudioConfiguration) -> PriceBreakdown:
    """Derive the itemized price of a configuration without touching it.

    Lines are emitted in a fixed order: base, shape, length, finish, accent
    finish changes, effects, rhinestones, charms, predefined artwork, custom
    artwork. Modifiers and tiers priced at zero produce no line.
    """
    items: list[PriceLineItem] = [_base_item(configuration)]

    _append_modifier(items, f"Shape: {configuration.shape}", SHAPE_PRICES[configuration.shape])
    _append_modifier(items, f"Length: {configuration.length}", LENGTH_PRICES[configuration.length])
    _append_modifier(items, f"Finish: {configuration.base_finish}", FINISH_PRICES[configuration.base_finish])

    finish_changes = sum(
        1
        for accent in configuration.accent_configs.values()
        if accent.finish and accent.finish != configuration.base_finish
    )
    if finish_changes > 0:
        items.append(
            PriceLineItem(
                label=f"Accent finish changes (×{finish_changes})",
                amount=float(finish_changes * ACCENT_FINISH_CHANGE_PRICE),
            )
        )

    for application in configuration.effects.values():
        pricing = EFFECT_PRICES[application.effect]
        if application.scope == "all":
            items.append(PriceLineItem(label=f"{application.effect} (all nails)", amount=float(pricing.all_nails)))
            continue
        # An empty explicit subset falls back to the accent nail count.
        nail_count = len(application.nails) if application.nails else len(configuration.accent_nails)
        items.append(
            PriceLineItem(
                label=f"{application.effect} (×{nail_count} nails)",
                amount=float(nail_count * pricing.per_nail),
            )
        )

    _append_modifier(
        items, f"Rhinestones: {configuration.rhinestone_tier}", RHINESTONE_PRICES[configuration.rhinestone_tier]
    )
    _append_modifier(items, f"Charms: {configuration.charm_tier}", CHARM_PRICES[configuration.charm_tier])

    for artwork in configuration.predefined_artwork.values():
        pricing = NAIL_ART_PRICES[artwork.type]
        if pricing.mode == "per-set":
            items.append(PriceLineItem(label=f"Nail art: {artwork.type}", amount=float(pricing.price)))
        else:
            nail_count = len(artwork.nails)
            items.append(
                PriceLineItem(
                    label=f"Nail art: {artwork.type} (×{nail_count})",
                    amount=float(nail_count * pricing.price),
                )
            )

    if configuration.custom_artwork is not None:
        items.append(PriceLineItem(label="Custom artwork", amount=0.0, is_quote_required=True))

    return PriceBreakdown(
        items=items,
        subtotal=float(sum(item.amount for item in items)),
        has_quote_items=any(item.is_quote_required for item in items),
    )


def _base_item(configuration: StudioConfiguration) -> PriceLineItem:
    if configuration.base_product is not None:
        product = configuration.base_product
        return PriceLineItem(label=f"Base: {product.title}", amount=float(product.price))
    return PriceLineItem(label="Custom Set Base", amount=float(BASE_CUSTOM_SET_PRICE))


def _append_modifier(items: list[PriceLineItem], label: str, price: float) -> None:
    if price > 0:
        items.append(PriceLineItem(label=label, amount=float(price)))
