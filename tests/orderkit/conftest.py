"""Shared pytest fixtures for orderkit tests."""

import pytest

from orderkit.config import Settings, get_settings
from orderkit.models import CartLineItem, Sauce, Topping, ToppingPlacement


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep ORDERKIT_* variables from the host out of the tests."""
    for name in list(Settings.model_fields):
        monkeypatch.delenv(f"ORDERKIT_{name.upper()}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def pepperoni() -> Topping:
    return Topping(id="t-pep", name="Pepperoni", price=1.5)


@pytest.fixture
def mushrooms() -> Topping:
    return Topping(id="t-mush", name="Mushrooms", price=1.0)


@pytest.fixture
def pepperoni_pizza(pepperoni: Topping) -> CartLineItem:
    """A medium pepperoni pizza, quantity 1."""
    return CartLineItem(
        id="pizza-1",
        name="Pepperoni Pizza",
        price=14.99,
        size="medium",
        toppings=ToppingPlacement(whole_pizza=[pepperoni]),
    )


@pytest.fixture
def wings() -> CartLineItem:
    return CartLineItem(
        id="wings-10",
        name="Chicken Wings",
        price=12.49,
        sauces=[Sauce(name="BBQ"), Sauce(name="Ranch", price=0.5)],
    )
