from decimal import Decimal

from foodhub.utils.pricing import calculate_addon_total, calculate_modifier_total, calculate_subtotal


def test_subtotal_includes_modifiers_and_addons():
    subtotal = calculate_subtotal(
        10,
        2,
        [{"name": "Cheese", "price": 1}, {"name": "Sauce", "price": 0.5}],
        [{"name": "Bacon", "price": 2, "quantity": 2}],
    )
    assert subtotal == Decimal("31.00")


def test_missing_prices_and_addon_quantity_default():
    assert calculate_modifier_total([{"name": "Free pickles"}]) == Decimal("0")
    assert calculate_addon_total([{"name": "Egg", "price": 1.25}]) == Decimal("1.25")
    assert calculate_addon_total([{"name": "Napkins"}]) == Decimal("0")


def test_subtotal_without_price_or_quantity_is_not_computed():
    assert calculate_subtotal(None, 2) is None
    assert calculate_subtotal(0, 2) is None
    assert calculate_subtotal(Decimal("5.00"), 0) is None


def test_subtotal_is_rounded_to_cents():
    assert calculate_subtotal("0.10", 3, [{"price": 0.2}]) == Decimal("0.90")
    assert calculate_subtotal("1.005", 1) == Decimal("1.01")
