"""Tests for cart line-item identity keys."""

import json

from orderkit.identity import identity_key
from orderkit.models import CartLineItem, Sauce, Topping, ToppingPlacement


class TestDeterminism:
    def test_same_item_same_key(self, pepperoni_pizza: CartLineItem):
        """Calling identity_key twice on an unmodified item gives one key."""
        assert identity_key(pepperoni_pizza) == identity_key(pepperoni_pizza)

    def test_unique_id_matches_identity_key(self, pepperoni_pizza: CartLineItem):
        """unique_id is the identity key of the current configuration."""
        assert pepperoni_pizza.unique_id == identity_key(pepperoni_pizza)

    def test_unique_id_recomputed_after_change(self, pepperoni_pizza: CartLineItem):
        """unique_id follows configuration changes."""
        before = pepperoni_pizza.unique_id
        pepperoni_pizza.size = "large"
        assert pepperoni_pizza.unique_id != before


class TestKeyFormat:
    def test_bare_item_uses_default_markers(self):
        """Absent optional fields serialize as empty markers, not errors."""
        item = CartLineItem(id="garlic-bread", name="Garlic Bread", price=6.99)
        assert identity_key(item) == (
            'garlic-bread-{"toppings":"","sauces":"","size":"","isHalfAndHalf":false}'
        )

    def test_key_starts_with_product_id(self, pepperoni_pizza: CartLineItem):
        assert identity_key(pepperoni_pizza).startswith("pizza-1-{")

    def test_config_fields_in_stable_order(self, pepperoni_pizza: CartLineItem):
        """The configuration record keeps toppings, sauces, size, flag order."""
        config = json.loads(identity_key(pepperoni_pizza)[len("pizza-1-") :])
        assert list(config) == ["toppings", "sauces", "size", "isHalfAndHalf"]
        assert config["size"] == "medium"
        assert json.loads(config["toppings"])["wholePizza"][0]["name"] == "Pepperoni"


class TestMergeCorrectness:
    def test_quantity_does_not_participate(self, pepperoni_pizza: CartLineItem):
        """Same pizza at quantity 1 and 3 shares a key."""
        three = pepperoni_pizza.model_copy(update={"quantity": 3})
        assert identity_key(pepperoni_pizza) == identity_key(three)

    def test_extra_charges_do_not_participate(self, pepperoni_pizza: CartLineItem):
        charged = pepperoni_pizza.model_copy(update={"extra_charges": 2.0})
        assert identity_key(pepperoni_pizza) == identity_key(charged)

    def test_size_changes_key(self, pepperoni_pizza: CartLineItem):
        large = pepperoni_pizza.model_copy(update={"size": "large"})
        assert identity_key(pepperoni_pizza) != identity_key(large)

    def test_half_and_half_changes_key(self, pepperoni_pizza: CartLineItem):
        split = pepperoni_pizza.model_copy(update={"is_half_and_half": True})
        assert identity_key(pepperoni_pizza) != identity_key(split)

    def test_topping_placement_changes_key(self, pepperoni: Topping):
        """Pepperoni on the whole pizza differs from pepperoni on one side."""
        whole = CartLineItem(
            id="pizza-1",
            name="Pizza",
            price=10.0,
            toppings=ToppingPlacement(whole_pizza=[pepperoni]),
        )
        left = CartLineItem(
            id="pizza-1",
            name="Pizza",
            price=10.0,
            toppings=ToppingPlacement(left_side=[pepperoni]),
        )
        right = CartLineItem(
            id="pizza-1",
            name="Pizza",
            price=10.0,
            toppings=ToppingPlacement(right_side=[pepperoni]),
        )
        assert len({identity_key(whole), identity_key(left), identity_key(right)}) == 3

    def test_sauces_change_key(self, wings: CartLineItem):
        plain = wings.model_copy(update={"sauces": [Sauce(name="BBQ")]})
        assert identity_key(wings) != identity_key(plain)

    def test_different_products_differ(self, pepperoni_pizza: CartLineItem):
        other = pepperoni_pizza.model_copy(update={"id": "pizza-2"})
        assert identity_key(pepperoni_pizza) != identity_key(other)


class TestOrderSensitivity:
    def _pizza(self, *toppings: Topping) -> CartLineItem:
        return CartLineItem(
            id="pizza-1",
            name="Pizza",
            price=10.0,
            toppings=ToppingPlacement(whole_pizza=list(toppings)),
        )

    def test_topping_order_matters_by_default(self, pepperoni, mushrooms):
        """Same toppings picked in a different order do not merge by default."""
        a = self._pizza(pepperoni, mushrooms)
        b = self._pizza(mushrooms, pepperoni)
        assert identity_key(a) != identity_key(b)

    def test_order_insensitive_mode_merges(self, pepperoni, mushrooms):
        a = self._pizza(pepperoni, mushrooms)
        b = self._pizza(mushrooms, pepperoni)
        assert identity_key(a, order_insensitive=True) == identity_key(
            b, order_insensitive=True
        )

    def test_order_insensitive_mode_sorts_sauces(self):
        a = CartLineItem(
            id="w", name="Wings", price=9.0, sauces=[Sauce(name="BBQ"), Sauce(name="Hot")]
        )
        b = CartLineItem(
            id="w", name="Wings", price=9.0, sauces=[Sauce(name="Hot"), Sauce(name="BBQ")]
        )
        assert identity_key(a) != identity_key(b)
        assert identity_key(a, order_insensitive=True) == identity_key(
            b, order_insensitive=True
        )

    def test_order_insensitive_mode_keeps_placement(self, pepperoni, mushrooms):
        """Sorting never moves a topping between placement lists."""
        a = CartLineItem(
            id="pizza-1",
            name="Pizza",
            price=10.0,
            toppings=ToppingPlacement(left_side=[pepperoni], right_side=[mushrooms]),
        )
        b = CartLineItem(
            id="pizza-1",
            name="Pizza",
            price=10.0,
            toppings=ToppingPlacement(left_side=[mushrooms], right_side=[pepperoni]),
        )
        assert identity_key(a, order_insensitive=True) != identity_key(
            b, order_insensitive=True
        )
