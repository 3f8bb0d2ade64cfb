"""Receipt construction and conversion of stored order records.

Carts become ``ReceiptData`` at checkout; raw order documents fetched from the
order store become ``PreviousOrder`` records for the order-history views.
"""

import math
import time
import uuid
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

from loguru import logger
from pydantic import BaseModel

from .cart import Cart
from .config import Settings, get_settings
from .customizations import extract_customizations
from .enums import OrderSource, OrderStatus, OrderType
from .models import (
    CartLineItem,
    CustomerInfo,
    DeliveryAddress,
    DeliveryDetails,
    OrderDetails,
    PersistedOrderItem,
    PickupDetails,
    PickupTimeInfo,
    PreviousOrder,
    PreviousOrderItem,
    ReceiptData,
    ReceiptItem,
)


class Totals(BaseModel):
    subtotal: float
    tax: float
    delivery_fee: float
    total: float


def calculate_totals(
    items: list[CartLineItem],
    order_type: OrderType,
    settings: Settings | None = None,
) -> Totals:
    """Price a list of cart lines.

    Delivery is charged a flat fee unless the subtotal reaches the
    free-delivery threshold.
    """
    settings = settings or get_settings()
    subtotal = sum(item.line_total for item in items)
    tax = subtotal * settings.tax_rate
    delivery_fee = 0.0
    if order_type == OrderType.DELIVERY and subtotal < settings.free_delivery_threshold:
        delivery_fee = settings.delivery_fee
    return Totals(
        subtotal=subtotal,
        tax=tax,
        delivery_fee=delivery_fee,
        total=subtotal + tax + delivery_fee,
    )


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


def persisted_item_from_cart(item: CartLineItem) -> dict[str, Any]:
    """Build the stored shape of a cart line as online checkout writes it.

    Size, toppings, sauces and the half-and-half flag are copied into a flat
    ``customizations`` object, and ``baseId`` keeps the menu item id.
    """
    record = item.to_wire()
    record["baseId"] = item.id

    customizations: dict[str, Any] = {}
    if item.size:
        customizations["size"] = str(item.size)
    if item.toppings:
        customizations["toppings"] = item.toppings.to_wire()
    if item.sauces:
        customizations["sauces"] = [s.to_wire() for s in item.sauces]
    if item.is_half_and_half:
        customizations["isHalfAndHalf"] = True
    if customizations:
        record["customizations"] = customizations
    return record


def receipt_item_from_cart(item: CartLineItem) -> ReceiptItem:
    customizations = extract_customizations(persisted_item_from_cart(item))
    return ReceiptItem(
        name=item.name,
        quantity=item.quantity,
        price=item.unit_price,
        total=item.line_total,
        customizations=customizations or None,
    )


def build_receipt(
    cart: Cart,
    *,
    order_id: str,
    store_id: str,
    customer: CustomerInfo,
    order_type: OrderType,
    payment_method: str,
    order_source: OrderSource = OrderSource.ONLINE,
    delivery_address: DeliveryAddress | None = None,
    pickup: PickupDetails | None = None,
    timestamp: int | None = None,
    settings: Settings | None = None,
) -> ReceiptData:
    """Create the receipt envelope for a checked-out cart."""
    totals = calculate_totals(cart.items, order_type, settings)

    delivery_details = None
    if order_type == OrderType.DELIVERY and delivery_address is not None:
        delivery_details = DeliveryDetails(
            address=delivery_address.street,
            city=delivery_address.city,
            postal_code=delivery_address.postal_code,
            fee=totals.delivery_fee,
        )
    pickup_details = None
    if order_type == OrderType.PICKUP:
        pickup_details = pickup or PickupDetails()

    receipt = ReceiptData(
        order_id=order_id,
        store_id=store_id,
        order_source=order_source,
        order_type=order_type,
        customer_info=customer,
        items=[receipt_item_from_cart(item) for item in cart.items],
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        payment_method=payment_method,
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
        delivery_details=delivery_details,
        pickup_details=pickup_details,
    )
    logger.info(
        "Built receipt {} ({} lines, total {:.2f})",
        order_id,
        len(receipt.items),
        receipt.total,
    )
    return receipt


def order_details_from_receipt(receipt: ReceiptData) -> OrderDetails:
    """Confirmation-page summary of a receipt."""
    order_type = (
        OrderType.DELIVERY
        if receipt.order_type == OrderType.DELIVERY
        else OrderType.PICKUP
    )
    pickup_time = None
    if receipt.pickup_details is not None:
        pickup_time = PickupTimeInfo(
            type=receipt.pickup_details.time,
            scheduled_time=receipt.pickup_details.scheduled_time,
        )
    delivery_address = None
    if receipt.delivery_details is not None:
        delivery_address = DeliveryAddress(
            street=receipt.delivery_details.address,
            city=receipt.delivery_details.city,
            postal_code=receipt.delivery_details.postal_code,
        )
    return OrderDetails(
        order_id=receipt.order_id,
        order_type=order_type,
        items=list(receipt.items),
        subtotal=receipt.subtotal,
        tax=receipt.tax,
        total=receipt.total,
        payment_method=receipt.payment_method,
        pickup_time=pickup_time,
        delivery_address=delivery_address,
    )


# ---------------------------------------------------------------------------
# Stored orders
# ---------------------------------------------------------------------------


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return value or default


def _item_name(raw: PersistedOrderItem) -> str:
    name = raw.get("name")
    return str(name) if name else "Unknown Item"


def receipt_item_from_record(raw: PersistedOrderItem) -> ReceiptItem:
    """Display line for a stored order item of any historical shape."""
    price = _number(raw.get("price"), 0.0)
    quantity = int(_number(raw.get("quantity"), 1))
    customizations = extract_customizations(raw)
    return ReceiptItem(
        name=_item_name(raw),
        quantity=quantity,
        price=price,
        total=price * quantity,
        customizations=customizations or None,
    )


def previous_order_item_from_record(raw: PersistedOrderItem) -> PreviousOrderItem:
    item_id = raw.get("id") or raw.get("baseId") or uuid.uuid4().hex
    size = raw.get("size")
    return PreviousOrderItem(
        id=str(item_id),
        name=_item_name(raw),
        size=str(size) if size else None,
        customizations=extract_customizations(raw),
        price=_number(raw.get("price"), 0.0),
        quantity=int(_number(raw.get("quantity"), 1)),
    )


def _order_date(created_at: Any) -> str:
    """ISO date of an order's createdAt (ISO string or epoch ms)."""
    try:
        if isinstance(created_at, str) and created_at:
            return datetime.fromisoformat(created_at).date().isoformat()
        if isinstance(created_at, (int, float)) and not isinstance(created_at, bool):
            moment = datetime.fromtimestamp(created_at / 1000, tz=timezone.utc)
            return moment.date().isoformat()
    except (ValueError, OverflowError, OSError):
        logger.warning("Unreadable createdAt {!r}, using today", created_at)
    return date.today().isoformat()


def _order_type(value: Any) -> OrderType:
    # Order history only distinguishes pickup from delivery.
    return OrderType.DELIVERY if value == OrderType.DELIVERY else OrderType.PICKUP


def _order_status(value: Any) -> OrderStatus:
    if value == OrderStatus.CANCELLED:
        return OrderStatus.CANCELLED
    return OrderStatus.COMPLETED


def previous_order_from_record(
    doc_id: str,
    data: Mapping[str, Any],
    customer_id: str = "",
    store_id: str | None = None,
) -> PreviousOrder:
    """Convert a raw order document into an order-history record.

    Args:
        doc_id: Document id, used when the order has no order number.
        data: The stored order document.
        customer_id: Fallback customer id (normally the phone searched for).
        store_id: Fallback store id.
    """
    customer_info = data.get("customerInfo")
    phone = customer_info.get("phone") if isinstance(customer_info, Mapping) else None
    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        raw_items = []

    order = PreviousOrder(
        id=str(data.get("orderNumber") or doc_id),
        customer_id=str(phone or data.get("customerPhone") or customer_id),
        store_id=str(data.get("storeId") or store_id or "unknown"),
        date=_order_date(data.get("createdAt")),
        items=[
            previous_order_item_from_record(item)
            for item in raw_items
            if isinstance(item, Mapping)
        ],
        total=_number(data.get("total"), 0.0),
        order_type=_order_type(data.get("orderType")),
        status=_order_status(data.get("status")),
    )
    logger.debug("Converted order {} ({} items)", order.id, len(order.items))
    return order
