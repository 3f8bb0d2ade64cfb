"""Shopping cart keyed by line-item identity."""

from loguru import logger
from pydantic import BaseModel, Field

from .config import get_settings
from .identity import identity_key
from .models import CartLineItem


class Cart(BaseModel):
    """Cart lines in insertion order, merged by identity key.

    Adding an item whose configuration is already in the cart bumps that
    line's quantity instead of appending a new line.
    """

    items: list[CartLineItem] = Field(default_factory=list)
    order_insensitive_identity: bool = False

    @classmethod
    def from_settings(cls) -> "Cart":
        """Create an empty cart using the configured identity mode."""
        return cls(order_insensitive_identity=get_settings().order_insensitive_identity)

    def key_for(self, item: CartLineItem) -> str:
        return identity_key(item, order_insensitive=self.order_insensitive_identity)

    def keyed(self) -> dict[str, CartLineItem]:
        """Cart lines by identity key."""
        return {self.key_for(item): item for item in self.items}

    def _index_of(self, unique_id: str) -> int | None:
        return next(
            (i for i, item in enumerate(self.items) if self.key_for(item) == unique_id),
            None,
        )

    def get(self, unique_id: str) -> CartLineItem | None:
        index = self._index_of(unique_id)
        return None if index is None else self.items[index]

    def add(self, item: CartLineItem) -> str:
        """Add an item, merging quantities with a matching line.

        Returns the identity key of the line that now holds the item.
        """
        unique_id = self.key_for(item)
        index = self._index_of(unique_id)
        if index is None:
            self.items.append(item.model_copy())
            logger.debug("Cart: new line {} x{}", item.name, item.quantity)
        else:
            existing = self.items[index]
            self.items[index] = existing.model_copy(
                update={"quantity": existing.quantity + item.quantity}
            )
            logger.debug(
                "Cart: merged {} into existing line (quantity {})",
                item.name,
                self.items[index].quantity,
            )
        return unique_id

    def remove(self, unique_id: str) -> bool:
        index = self._index_of(unique_id)
        if index is None:
            logger.debug("Cart: no line to remove for {}", unique_id)
            return False
        del self.items[index]
        return True

    def update_quantity(self, unique_id: str, quantity: int) -> None:
        """Set a line's quantity. Anything below 1 removes the line."""
        if quantity < 1:
            self.remove(unique_id)
            return
        index = self._index_of(unique_id)
        if index is None:
            logger.debug("Cart: no line to update for {}", unique_id)
            return
        self.items[index] = self.items[index].model_copy(update={"quantity": quantity})

    def clear(self) -> None:
        self.items.clear()

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def __add__(self, other: object) -> "Cart":
        if not isinstance(other, CartLineItem):
            return NotImplemented
        cart = self.model_copy(update={"items": list(self.items)})
        cart.add(other)
        return cart
