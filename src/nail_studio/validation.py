from __future__ import annotations

import re
from typing import Any

# The gateway keeps its own copy of every closed list: it trusts nothing from
# the studio side, including its enums.
VALID_SHAPES = ("almond", "square", "oval", "coffin", "stiletto")
VALID_LENGTHS = ("short", "medium", "long", "extra-long")
VALID_FINISHES = ("glossy", "matte")
VALID_RHINESTONE_TIERS = ("none", "just-a-touch", "a-little-sparkle", "full-glam")
VALID_CHARM_TIERS = ("none", "single-statement", "a-few-accents", "charmed-out")
VALID_ARTWORK_TYPES = ("none", "predefined", "custom", "both")
VALID_STATUSES = ("pending", "quoted", "approved", "in_progress", "completed", "cancelled")
VALID_EFFECTS = ("chrome", "glitter", "french-tip")
VALID_EFFECT_SCOPES = ("all", "accents-only")

MAX_TEXT_LENGTH = 1000
MAX_CHARM_PREFERENCES_LENGTH = 500
MAX_HANDLE_LENGTH = 100
MAX_COLORS = 10
MAX_COLOR_LENGTH = 50
MAX_ACCENT_NAILS = 10
MAX_EFFECTS = 10
MAX_ARTWORK_SELECTIONS = 10
MAX_ARTWORK_TYPE_LENGTH = 100
MAX_NAILS_PER_SELECTION = 10
MAX_INSPIRATION_IMAGES = 10
MAX_IMAGE_REFERENCE_LENGTH = 500
MAX_ESTIMATED_PRICE = 10000

SCRIPT_TAG_PATTERN = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
JAVASCRIPT_URI_PATTERN = re.compile(r"javascript:", re.IGNORECASE)
EVENT_HANDLER_PATTERN = re.compile(r"\bon\w+\s*=", re.IGNORECASE)
HTTPS_URL_PATTERN = re.compile(r"^https://[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
STORAGE_PATH_PATTERN = re.compile(r"^[a-f0-9-]+/\d+-\d+\.\w+$")
UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


class OrderValidationError(ValueError):
    """Raised on the first violation found in an untrusted order payload."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def sanitize_text(value: Any, max_length: int = MAX_TEXT_LENGTH) -> str | None:
    """Trim, cap and strip script blocks, inline handlers and javascript: URIs.

    Not an HTML sanitizer. Non-string and blank input becomes ``None``.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()[:max_length]
    if not text:
        return None
    # Repeat until stable; removing an inner match can join an outer one.
    previous = None
    while text != previous:
        previous = text
        text = SCRIPT_TAG_PATTERN.sub("", text)
        text = JAVASCRIPT_URI_PATTERN.sub("", text)
        text = EVENT_HANDLER_PATTERN.sub("", text)
    return text


def validate_custom_order(body: Any) -> dict[str, Any]:
    """Check a submitted configuration and return the normalized insert payload.

    Checks run in a fixed order and stop at the first failure. The estimated
    price is only bounds-checked; it is never recomputed here.
    """
    if not isinstance(body, dict):
        raise OrderValidationError("body", "Request body must be a JSON object")

    _require_enum(body, "shape", VALID_SHAPES)
    _require_enum(body, "length", VALID_LENGTHS)
    _require_enum(body, "finish", VALID_FINISHES)

    _optional_enum(body, "rhinestones_tier", VALID_RHINESTONE_TIERS)
    _optional_enum(body, "charms_tier", VALID_CHARM_TIERS)
    _optional_enum(body, "artwork_type", VALID_ARTWORK_TYPES)
    _optional_enum(body, "status", VALID_STATUSES)

    validate_colors(body.get("colors"))
    validate_accent_nails(body.get("accent_nails"))
    validate_effects(body.get("effects"))
    validate_artwork_selections(body.get("artwork_selections"))
    validate_inspiration_images(body.get("inspiration_images"))
    validate_estimated_price(body.get("estimated_price"))

    return {
        "base_product_handle": sanitize_text(body.get("base_product_handle"), MAX_HANDLE_LENGTH),
        "shape": body["shape"],
        "length": body["length"],
        "finish": body["finish"],
        "colors": body.get("colors") or {},
        "accent_nails": body.get("accent_nails") or [],
        "effects": body.get("effects") or [],
        "rhinestones_tier": body.get("rhinestones_tier") or "none",
        "charms_tier": body.get("charms_tier") or "none",
        "charms_preferences": sanitize_text(body.get("charms_preferences"), MAX_CHARM_PREFERENCES_LENGTH),
        "artwork_type": body.get("artwork_type") or "none",
        "artwork_selections": body.get("artwork_selections") or [],
        "custom_artwork_description": sanitize_text(body.get("custom_artwork_description")),
        "inspiration_images": body.get("inspiration_images") or [],
        "estimated_price": body.get("estimated_price"),
        "requires_quote": body.get("requires_quote") is True,
        "status": body.get("status") or "pending",
        "notes": sanitize_text(body.get("notes")),
    }


def validate_image_update(body: Any) -> tuple[str, list[str]]:
    if not isinstance(body, dict):
        raise OrderValidationError("body", "Request body must be a JSON object")
    order_id = body.get("orderId")
    if not order_id or not isinstance(order_id, str):
        raise OrderValidationError("orderId", "Missing or invalid orderId")
    if not UUID_PATTERN.fullmatch(order_id):
        raise OrderValidationError("orderId", "Invalid orderId format: expected a UUID")
    images = body.get("inspirationImages")
    validate_inspiration_images(images)
    return order_id, list(images or [])


def validate_colors(colors: Any) -> None:
    if colors is None:
        return
    if not isinstance(colors, dict):
        raise OrderValidationError("colors", "colors must be an object")

    palette = colors.get("palette")
    if palette is not None:
        if not isinstance(palette, dict):
            raise OrderValidationError("colors", "colors.palette must be an object")
        palette_colors = palette.get("colors")
        if palette_colors is not None:
            if not isinstance(palette_colors, list):
                raise OrderValidationError("colors", "colors.palette.colors must be an array")
            if len(palette_colors) > MAX_COLORS:
                raise OrderValidationError("colors", f"Too many palette colors: max {MAX_COLORS}")
            for color in palette_colors:
                if not isinstance(color, str) or len(color) > MAX_COLOR_LENGTH:
                    raise OrderValidationError("colors", "Invalid color format in palette")

    nail_colors = colors.get("nailColors")
    if nail_colors is not None:
        if not isinstance(nail_colors, dict):
            raise OrderValidationError("colors", "colors.nailColors must be an object")
        if len(nail_colors) > MAX_COLORS:
            raise OrderValidationError("colors", f"Too many nail colors: max {MAX_COLORS}")
        for value in nail_colors.values():
            if value and not isinstance(value, str):
                raise OrderValidationError("colors", "Invalid nail color value")
            if isinstance(value, str) and len(value) > MAX_COLOR_LENGTH:
                raise OrderValidationError("colors", f"Nail color value too long: max {MAX_COLOR_LENGTH} characters")


def validate_accent_nails(accent_nails: Any) -> None:
    entries = _optional_array(accent_nails, "accent_nails", MAX_ACCENT_NAILS, "Too many accent nails")
    for entry in entries:
        if not isinstance(entry, dict):
            raise OrderValidationError("accent_nails", "Invalid accent nail entry")
        index = entry.get("index")
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 9:
            raise OrderValidationError("accent_nails", "Invalid accent nail index: expected an integer in 0..9")


def validate_effects(effects: Any) -> None:
    entries = _optional_array(effects, "effects", MAX_EFFECTS, "Too many effects")
    for entry in entries:
        if not isinstance(entry, dict):
            raise OrderValidationError("effects", "Invalid effect entry")
        if entry.get("effect") not in VALID_EFFECTS:
            raise OrderValidationError("effects", f"Invalid effect type: {entry.get('effect')}")
        if entry.get("scope") not in VALID_EFFECT_SCOPES:
            raise OrderValidationError("effects", f"Invalid effect scope: {entry.get('scope')}")
        nails = entry.get("nails")
        if isinstance(nails, list) and len(nails) > MAX_NAILS_PER_SELECTION:
            raise OrderValidationError("effects", f"Too many nails in effect: max {MAX_NAILS_PER_SELECTION}")


def validate_artwork_selections(selections: Any) -> None:
    entries = _optional_array(
        selections, "artwork_selections", MAX_ARTWORK_SELECTIONS, "Too many artwork selections"
    )
    for entry in entries:
        if not isinstance(entry, dict):
            raise OrderValidationError("artwork_selections", "Invalid artwork selection entry")
        art_type = entry.get("type")
        if not isinstance(art_type, str) or len(art_type) > MAX_ARTWORK_TYPE_LENGTH:
            raise OrderValidationError(
                "artwork_selections", f"Invalid artwork type: max {MAX_ARTWORK_TYPE_LENGTH} characters"
            )
        nails = entry.get("nails")
        if isinstance(nails, list) and len(nails) > MAX_NAILS_PER_SELECTION:
            raise OrderValidationError(
                "artwork_selections", f"Too many nails in artwork selection: max {MAX_NAILS_PER_SELECTION}"
            )


def validate_inspiration_images(images: Any) -> None:
    entries = _optional_array(images, "inspiration_images", MAX_INSPIRATION_IMAGES, "Too many inspiration images")
    for reference in entries:
        if not isinstance(reference, str):
            raise OrderValidationError("inspiration_images", "Invalid image URL")
        if len(reference) > MAX_IMAGE_REFERENCE_LENGTH:
            raise OrderValidationError(
                "inspiration_images", f"Image URL too long: max {MAX_IMAGE_REFERENCE_LENGTH} characters"
            )
        if not is_image_reference(reference):
            raise OrderValidationError(
                "inspiration_images", "Invalid image URL or path format: expected an https URL or a storage path"
            )


def validate_estimated_price(price: Any) -> None:
    if price is None:
        return
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise OrderValidationError("estimated_price", "estimated_price must be a number")
    if not 0 <= price <= MAX_ESTIMATED_PRICE:
        raise OrderValidationError("estimated_price", f"estimated_price must be between 0 and {MAX_ESTIMATED_PRICE}")


def is_image_reference(value: str) -> bool:
    return bool(HTTPS_URL_PATTERN.match(value) or STORAGE_PATH_PATTERN.match(value))


def _require_enum(body: dict[str, Any], field: str, valid_values: tuple[str, ...]) -> None:
    value = body.get(field)
    if not value or value not in valid_values:
        raise OrderValidationError(field, f"Invalid or missing {field}")


def _optional_enum(body: dict[str, Any], field: str, valid_values: tuple[str, ...]) -> None:
    value = body.get(field)
    if not value:
        return
    if value not in valid_values:
        raise OrderValidationError(field, f"Invalid {field}: {value}")


def _optional_array(value: Any, field: str, max_items: int, too_many: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise OrderValidationError(field, f"{field} must be an array")
    if len(value) > max_items:
        raise OrderValidationError(field, f"{too_many}: max {max_items}")
    return value
