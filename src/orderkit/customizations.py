"""Customization summaries for persisted order line items.

Stored order items were written by several generations of the ordering
front-ends, so the customization payload can sit under different field names
and take different shapes. ``extract_customizations`` reads all of them and
returns display lines such as ``["Pepperoni, Mushrooms (Left)", "Thin Crust"]``.

Resolution order:

1. ``comboItems``: one group of prefixed lines per combo sub-item.
2. The first present legacy field (``customizations``, ``modifiers``,
   ``options``, ``extras``, ``additions``), dispatched on its shape:
   numeric-keyed object, array, plain object or string.
3. Customization fields stored inline on the item itself.
"""

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel

from .models import LEGACY_CUSTOMIZATION_FIELDS, PersistedOrderItem

_PLACEMENTS = (
    ("wholePizza", ""),
    ("leftSide", " (Left)"),
    ("rightSide", " (Right)"),
)

# Item-level fields that carry a customization when no legacy field exists.
_INLINE_FIELDS = (
    "toppings",
    "sauces",
    "instructions",
    "crust",
    "sauce",
    "isHalfAndHalf",
    "extraCharge",
)

_COMBO_NAME = re.compile(r"combo", re.IGNORECASE)
_NUMERIC_KEY = re.compile(r"^\d+$")


@dataclass(frozen=True)
class Extracted:
    """Customization lines, already trimmed and deduplicated."""

    lines: list[str]


@dataclass(frozen=True)
class Malformed:
    """The item's customization data has a shape no reader understands."""

    reason: str


Extraction = Extracted | Malformed


# ---------------------------------------------------------------------------
# Field readers
# ---------------------------------------------------------------------------


def _is_present(value: Any) -> bool:
    # Empty lists and objects still claim the field.
    if isinstance(value, (list, Mapping)):
        return True
    return value is not None and value is not False and value != 0 and value != ""


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _named(entry: Any) -> str | None:
    if isinstance(entry, Mapping):
        name = entry.get("name")
        if name:
            return str(name)
    return None


def _topping_names(toppings: Any) -> list[str]:
    """Flatten a topping placement into names, marking side toppings."""
    if not isinstance(toppings, Mapping):
        return []
    names = []
    for field, suffix in _PLACEMENTS:
        entries = toppings.get(field)
        if not isinstance(entries, list):
            continue
        for entry in entries:
            name = _named(entry)
            if name:
                names.append(f"{name}{suffix}")
    return names


def _instruction_names(instructions: Any) -> list[str]:
    """Non-blank instruction strings, or the names of instruction objects."""
    if isinstance(instructions, str):
        instructions = [instructions]
    if not isinstance(instructions, list):
        return []
    names = []
    for entry in instructions:
        if isinstance(entry, str):
            if entry.strip():
                names.append(entry)
        else:
            name = _named(entry)
            if name:
                names.append(name)
    return names


def _sauce_names(sauces: Any) -> list[str]:
    if not isinstance(sauces, list):
        return []
    return [name for name in map(_named, sauces) if name]


def _non_default(value: Any) -> str | None:
    """Crust and sauce types are only worth showing when not "regular"."""
    if isinstance(value, str) and value.strip() and value.strip().lower() != "regular":
        return value
    return None


# ---------------------------------------------------------------------------
# Entry and combo extraction
# ---------------------------------------------------------------------------


def _entry_lines(entry: Mapping, parent_size: Any, prefix: str = "") -> list[str]:
    """Extract display lines from one customization object.

    With a prefix (a pizza inside a combo), toppings, instructions and
    sauces share one prefixed line.
    """
    segments = []
    toppings = _topping_names(entry.get("toppings"))
    if toppings:
        segments.append(", ".join(toppings))
    instructions = _instruction_names(entry.get("instructions"))
    if instructions:
        segments.append(f"Instructions: {', '.join(instructions)}")
    sauces = _sauce_names(entry.get("sauces"))
    if sauces:
        segments.append(f"Sauces: {', '.join(sauces)}")

    if prefix and segments:
        lines = [f"{prefix}{'; '.join(segments)}"]
    else:
        lines = segments

    if entry.get("isHalfAndHalf") is True:
        lines.append(f"{prefix}Half & Half")
    extra = entry.get("extraCharge")
    if _is_positive_number(extra):
        lines.append(f"{prefix}Extra: ${extra:.2f}")
    crust = _non_default(entry.get("crust"))
    if crust:
        lines.append(f"{prefix}{crust} Crust")
    sauce = _non_default(entry.get("sauce"))
    if sauce:
        lines.append(f"{prefix}{sauce} Sauce")
    size = entry.get("size")
    if isinstance(size, str) and size and size != parent_size:
        lines.append(f"{prefix}Size: {size}")
    return lines


def _combo_lines(combo_items: list) -> list[str]:
    lines = []
    for index, sub_item in enumerate(combo_items, start=1):
        if not isinstance(sub_item, Mapping):
            continue
        prefix = f"{sub_item.get('name') or f'Item {index}'}: "

        toppings = _topping_names(sub_item.get("toppings"))
        if toppings:
            lines.append(f"{prefix}{', '.join(toppings)}")
        sauces = _sauce_names(sub_item.get("sauces"))
        if sauces:
            lines.append(f"{prefix}Sauces: {', '.join(sauces)}")
        if sub_item.get("size"):
            lines.append(f"{prefix}Size: {sub_item['size']}")
        instructions = _instruction_names(sub_item.get("instructions"))
        if instructions:
            lines.append(f"{prefix}Instructions: {', '.join(instructions)}")
    return lines


def _sequence_lines(
    entries: Iterable[Any], parent_size: Any, number_pizzas: bool = False
) -> list[str]:
    lines = []
    pizza_count = 0
    for entry in entries:
        if isinstance(entry, str):
            lines.append(entry)
        elif isinstance(entry, Mapping):
            prefix = ""
            if number_pizzas and entry.get("type") == "pizza":
                pizza_count += 1
                prefix = f"Pizza {pizza_count}: "
            lines.extend(_entry_lines(entry, parent_size, prefix))
    return lines


def _numeric_keyed(value: Mapping) -> list[Any] | None:
    """Values of an object keyed "0", "1", ... in index order, else None."""
    keys = list(value.keys())
    if not all(
        (isinstance(k, int) and not isinstance(k, bool) and k >= 0)
        or (isinstance(k, str) and _NUMERIC_KEY.match(k))
        for k in keys
    ):
        return None
    return [value[k] for k in sorted(keys, key=int)]


def _finalize(lines: Iterable[Any]) -> list[str]:
    """Trim, drop blanks and deduplicate, keeping first-seen order."""
    ordered = dict.fromkeys(
        line.strip() for line in lines if isinstance(line, str) and line.strip()
    )
    return list(ordered)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_customizations(raw: PersistedOrderItem | BaseModel) -> Extraction:
    """Read the customization payload of a persisted order item.

    Returns ``Extracted`` with the display lines, or ``Malformed`` when the
    payload has an unsupported shape.
    """
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True, mode="json")
    if not isinstance(raw, Mapping):
        return Malformed(f"order item is {type(raw).__name__}, not an object")

    parent_size = raw.get("size")

    combo_items = raw.get("comboItems")
    if isinstance(combo_items, list) and combo_items:
        lines = _combo_lines(combo_items)
        if lines:
            logger.debug("Combo customizations from {} sub-items", len(combo_items))
            return Extracted(_finalize(lines))

    field = next(
        (f for f in LEGACY_CUSTOMIZATION_FIELDS if _is_present(raw.get(f))), None
    )
    if field is None:
        if any(_is_present(raw.get(f)) for f in _INLINE_FIELDS):
            logger.debug("Customizations stored inline on the item")
            return Extracted(_finalize(_entry_lines(raw, parent_size)))
        return Extracted([])

    data = raw[field]
    logger.debug("Customizations found in field: {}", field)

    if isinstance(data, Mapping):
        values = _numeric_keyed(data)
        if values is not None:
            lines = _sequence_lines(values, parent_size)
        else:
            lines = _entry_lines(data, parent_size)
    elif isinstance(data, list):
        is_combo = isinstance(raw.get("name"), str) and bool(
            _COMBO_NAME.search(raw["name"])
        )
        lines = _sequence_lines(data, parent_size, number_pizzas=is_combo)
    elif isinstance(data, str):
        lines = [data]
    else:
        return Malformed(f"{field} is {type(data).__name__}")

    return Extracted(_finalize(lines))


def extract_customizations(raw: PersistedOrderItem | BaseModel) -> list[str]:
    """Return display lines for an item's customizations, never raising.

    A broken customization summary must not block showing the order, so
    any malformed input degrades to an empty list.
    """
    try:
        result = normalize_customizations(raw)
    except Exception:
        logger.opt(exception=True).warning("Failed to extract customizations")
        return []

    if isinstance(result, Malformed):
        name = raw.get("name") if isinstance(raw, Mapping) else None
        logger.warning(
            "Ignoring malformed customizations for {}: {}", name, result.reason
        )
        return []
    return result.lines
