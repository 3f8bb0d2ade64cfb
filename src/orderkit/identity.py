"""Identity keys for cart line items.

Two cart lines with the same key are the same purchasable configuration and
are merged by summing their quantities. Quantity and extra charges never
participate in the key.
"""

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import CartLineItem, Sauce, ToppingPlacement

_PLACEMENT_FIELDS = ("wholePizza", "leftSide", "rightSide")


def _to_json(value: Any) -> str:
    # Compact separators and raw unicode, matching the keys the web
    # front-ends have already stored.
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _sort_key(entry: dict[str, Any]) -> tuple[str, str]:
    return (str(entry.get("name", "")), str(entry.get("id", "")))


def _serialize_toppings(
    toppings: "ToppingPlacement | None", order_insensitive: bool
) -> str:
    if toppings is None:
        return ""
    data = toppings.model_dump(by_alias=True, mode="json", exclude_none=True)
    if order_insensitive:
        for field in _PLACEMENT_FIELDS:
            data[field] = sorted(data[field], key=_sort_key)
    return _to_json(data)


def _serialize_sauces(sauces: "list[Sauce] | None", order_insensitive: bool) -> str:
    if sauces is None:
        return ""
    data = [s.model_dump(by_alias=True, mode="json", exclude_none=True) for s in sauces]
    if order_insensitive:
        data.sort(key=_sort_key)
    return _to_json(data)


def identity_key(item: "CartLineItem", *, order_insensitive: bool = False) -> str:
    """Return the deterministic identity key of a cart line item.

    The key is ``"<id>-<json>"`` where the JSON record holds the serialized
    toppings, sauces, size and half-and-half flag in that order. Absent
    fields serialize to ``""`` (or ``false`` for the flag).

    Args:
        item: The configured cart line.
        order_insensitive: Sort each topping placement list and the sauce
            list before serializing, so the same selections made in a
            different order share a key. Off by default, which keeps keys
            compatible with carts saved before the option existed.
    """
    config = {
        "toppings": _serialize_toppings(item.toppings, order_insensitive),
        "sauces": _serialize_sauces(item.sauces, order_insensitive),
        "size": str(item.size) if item.size else "",
        "isHalfAndHalf": bool(item.is_half_and_half),
    }
    return f"{item.id}-{_to_json(config)}"
