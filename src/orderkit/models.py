"""Order, cart and receipt data model.

Attribute names are snake_case; the camelCase names used by the ordering
front-ends and stored order documents are accepted and emitted as aliases.
"""

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .enums import (
    OrderSource,
    OrderStatus,
    OrderType,
    PickupTime,
    PrintStatus,
    Size,
)
from .identity import identity_key

# A line item as written by any historical version of the ordering system.
# No schema is enforced; see customizations.extract_customizations.
PersistedOrderItem = Mapping[str, Any]

# Field names that have held the customization payload, in lookup priority.
LEGACY_CUSTOMIZATION_FIELDS = (
    "customizations",
    "modifiers",
    "options",
    "extras",
    "additions",
)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump using the camelCase document field names."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Topping(WireModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: float = 0.0


class ToppingPlacement(WireModel):
    whole_pizza: list[Topping] = Field(default_factory=list)
    left_side: list[Topping] = Field(default_factory=list)
    right_side: list[Topping] = Field(default_factory=list)

    @property
    def has_side_toppings(self) -> bool:
        """Side-specific toppings only exist on half-and-half pizzas."""
        return bool(self.left_side or self.right_side)


class Sauce(WireModel):
    name: str
    price: float | None = None


class ComboSubItem(WireModel):
    id: str
    name: str
    quantity: int = Field(default=1, ge=1)
    toppings: ToppingPlacement | None = None
    sauces: list[Sauce] | None = None
    size: str | None = None
    instructions: list[str] | None = None


class CartLineItem(WireModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    price: float
    quantity: int = Field(default=1, ge=1)
    image_url: str | None = None
    toppings: ToppingPlacement | None = None
    sauces: list[Sauce] | None = None
    size: Size | None = None
    is_half_and_half: bool = False
    is_combo: bool = False
    combo_items: list[ComboSubItem] | None = None
    extra_charges: float | None = None

    @model_validator(mode="after")
    def set_half_and_half_from_toppings(self) -> Self:
        # Side toppings only exist on half-and-half pizzas.
        if self.toppings is not None and self.toppings.has_side_toppings:
            if not self.is_half_and_half:
                self.is_half_and_half = True
        return self

    @property
    def unique_id(self) -> str:
        """Identity key of the current configuration (recomputed on access)."""
        return identity_key(self)

    @property
    def unit_price(self) -> float:
        return self.price + (self.extra_charges or 0.0)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def _is_same_item(self, other: "CartLineItem") -> bool:
        """Check if both items are the same purchasable configuration."""
        return self.unique_id == other.unique_id

    def __add__(self, other: object) -> "CartLineItem":
        if not isinstance(other, CartLineItem) or not self._is_same_item(other):
            return NotImplemented
        return self.model_copy(update={"quantity": self.quantity + other.quantity})


class ReceiptItem(WireModel):
    name: str
    quantity: int
    price: float
    total: float
    customizations: list[str] | None = None


class CustomerInfo(WireModel):
    name: str
    phone: str


class DeliveryDetails(WireModel):
    address: str
    city: str
    postal_code: str
    fee: float | None = None


class PickupDetails(WireModel):
    time: PickupTime = PickupTime.ASAP
    scheduled_time: str | None = None


class ReceiptData(WireModel):
    id: str | None = None
    order_id: str
    store_id: str
    order_source: OrderSource
    order_type: OrderType
    customer_info: CustomerInfo
    items: list[ReceiptItem] = Field(default_factory=list)
    subtotal: float
    tax: float
    total: float
    payment_method: str
    timestamp: int  # epoch milliseconds
    # Bookkeeping owned by the printing side.
    status: PrintStatus | None = None
    print_attempts: int | None = None
    last_print_attempt: int | None = None
    delivery_details: DeliveryDetails | None = None
    pickup_details: PickupDetails | None = None


class PickupTimeInfo(WireModel):
    type: PickupTime = PickupTime.ASAP
    scheduled_time: str | None = None


class DeliveryAddress(WireModel):
    street: str
    city: str
    postal_code: str


class OrderDetails(WireModel):
    order_id: str
    order_type: OrderType
    items: list[ReceiptItem] = Field(default_factory=list)
    subtotal: float
    tax: float
    total: float
    payment_method: str
    pickup_time: PickupTimeInfo | None = None
    delivery_address: DeliveryAddress | None = None


class PreviousOrderItem(WireModel):
    id: str
    name: str
    size: str | None = None
    customizations: list[str] = Field(default_factory=list)
    price: float = 0.0
    quantity: int = 1


class PreviousOrder(WireModel):
    id: str
    customer_id: str
    store_id: str
    date: str  # YYYY-MM-DD
    items: list[PreviousOrderItem] = Field(default_factory=list)
    total: float = 0.0
    order_type: OrderType
    status: OrderStatus
