"""Cart line-item identity and order customization summaries."""

from .cart import Cart
from .customizations import (
    Extracted,
    Malformed,
    extract_customizations,
    normalize_customizations,
)
from .enums import OrderSource, OrderStatus, OrderType, PickupTime, PrintStatus, Size
from .identity import identity_key
from .models import (
    LEGACY_CUSTOMIZATION_FIELDS,
    CartLineItem,
    ComboSubItem,
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
    Sauce,
    Topping,
    ToppingPlacement,
)
from .receipts import (
    build_receipt,
    calculate_totals,
    persisted_item_from_cart,
    previous_order_from_record,
    receipt_item_from_record,
)

__all__ = [
    "LEGACY_CUSTOMIZATION_FIELDS",
    "Cart",
    "CartLineItem",
    "ComboSubItem",
    "CustomerInfo",
    "DeliveryAddress",
    "DeliveryDetails",
    "Extracted",
    "Malformed",
    "OrderDetails",
    "OrderSource",
    "OrderStatus",
    "OrderType",
    "PersistedOrderItem",
    "PickupDetails",
    "PickupTime",
    "PickupTimeInfo",
    "PreviousOrder",
    "PreviousOrderItem",
    "PrintStatus",
    "ReceiptData",
    "ReceiptItem",
    "Sauce",
    "Size",
    "Topping",
    "ToppingPlacement",
    "build_receipt",
    "calculate_totals",
    "extract_customizations",
    "identity_key",
    "normalize_customizations",
    "persisted_item_from_cart",
    "previous_order_from_record",
    "receipt_item_from_record",
]
