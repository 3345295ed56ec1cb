"""
Cart line price calculation utilities
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

TWO_PLACES = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number (or missing value) to Decimal without float artifacts"""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value: Any) -> Optional[Decimal]:
    """Round a price to cents the way the NUMERIC(10, 2) columns store it"""
    if value is None:
        return None
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def calculate_modifier_total(modifiers: Optional[List[Dict[str, Any]]]) -> Decimal:
    """Sum of modifier prices. A modifier without a price costs nothing."""
    if not modifiers or not isinstance(modifiers, list):
        return Decimal("0")
    return sum((to_decimal(mod.get("price")) for mod in modifiers), Decimal("0"))


def calculate_addon_total(addons: Optional[List[Dict[str, Any]]]) -> Decimal:
    """Sum of addon price x addon quantity. Quantity defaults to 1, price to 0."""
    if not addons or not isinstance(addons, list):
        return Decimal("0")
    total = Decimal("0")
    for addon in addons:
        quantity = addon.get("quantity") or 1
        total += to_decimal(addon.get("price")) * to_decimal(quantity)
    return total


def calculate_subtotal(
    price_at_add: Any,
    quantity: Optional[int],
    selected_modifiers: Optional[List[Dict[str, Any]]] = None,
    selected_addons: Optional[List[Dict[str, Any]]] = None,
) -> Optional[Decimal]:
    """
    Calculate a cart line subtotal.

    Args:
        price_at_add: Unit price snapshot
        quantity: Number of units
        selected_modifiers: [{groupId, optionId, name, price}]
        selected_addons: [{id, name, price, quantity}]

    Returns:
        (price_at_add + modifier total + addon total) * quantity rounded to
        2 decimal places, or None when price_at_add or quantity is missing or zero
    """
    if not price_at_add or not quantity:
        return None

    unit_total = (
        to_decimal(price_at_add)
        + calculate_modifier_total(selected_modifiers)
        + calculate_addon_total(selected_addons)
    )
    return (unit_total * quantity).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
