"""
Cart line resolution and cart queries

Every create or update of a cart line goes through CartLineResolver, which
validates the line, refreshes its expiry, fingerprints its customization,
merges identical lines and recomputes the subtotal before anything is stored.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import exc as sa_exc
from sqlalchemy import update
from sqlalchemy.orm import Session

from foodhub.config import settings
from foodhub.exceptions import IntegrityError, NotFoundException, ValidationError
from foodhub.models.account import Account
from foodhub.models.cart_item import CartItem
from foodhub.models.customer import Customer
from foodhub.models.merchant import Merchant
from foodhub.models.merchant_product import MerchantProduct
from foodhub.models.product import Product
from foodhub.schemas.cart_item import CartItemCreate, CartItemUpdate
from foodhub.utils.item_hash import compute_item_hash
from foodhub.utils.pricing import calculate_subtotal, to_money

logger = logging.getLogger(__name__)

CREATED = "created"
MERGED = "merged"

# Columns that can never be cleared by an update
REQUIRED_FIELDS = ("merchant_id", "product_id", "merchant_product_id", "quantity")
SELECTION_FIELDS = ("selected_modifiers", "selected_addons")


@dataclass
class CartLineResult:
    """Outcome of an add-to-cart: a new line was created, or an identical line absorbed the quantity."""
    outcome: str
    item: CartItem

    @property
    def merged(self) -> bool:
        return self.outcome == MERGED


def _field_values(model: BaseModel, fields) -> Dict[str, Any]:
    """Plain column values for the given schema fields, selections kept in their camelCase JSON shape"""
    values = {}
    for name in fields:
        value = getattr(model, name)
        if name in SELECTION_FIELDS and value is not None:
            value = [selection.model_dump(by_alias=True, exclude_none=True) for selection in value]
        elif isinstance(value, enum.Enum):
            value = value.value
        values[name] = value
    return values


class CartLineResolver:
    """
    Normalizes, deduplicates and prices cart lines before they are persisted.

    Duplicate lines are prevented by the (customer_id, merchant_id, item_hash)
    unique constraint; a create that finds or collides with an identical line
    atomically increments that line's quantity instead.
    """

    def __init__(
        self,
        db: Session,
        expiry_days: int = settings.CART_ITEM_EXPIRY_DAYS,
        min_quantity: int = settings.CART_ITEM_MIN_QUANTITY,
        max_quantity: int = settings.CART_ITEM_MAX_QUANTITY,
        instructions_max_length: int = settings.SPECIAL_INSTRUCTIONS_MAX_LENGTH,
        rider_notes_max_length: int = settings.NOTES_FOR_RIDER_MAX_LENGTH,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.db = db
        self.expiry_days = expiry_days
        self.min_quantity = min_quantity
        self.max_quantity = max_quantity
        self.instructions_max_length = instructions_max_length
        self.rider_notes_max_length = rider_notes_max_length
        self.clock = clock

    # Public operations

    def create(self, data: CartItemCreate, actor: Optional[Account] = None) -> CartLineResult:
        values = _field_values(data, CartItemCreate.model_fields)
        values["selected_modifiers"] = values["selected_modifiers"] or []
        values["selected_addons"] = values["selected_addons"] or []

        self._validate(values)
        self._round_prices(values)
        self._require_customer(values["customer_id"])
        self._check_vendor_integrity(values["merchant_id"], values["product_id"], values["merchant_product_id"])
        self._require_variation(values["selected_variation_id"])

        values["expires_at"] = self._expiry()
        values["item_hash"] = self._fingerprint(values)
        values["subtotal"] = self._subtotal(values)

        existing_id = self._find_line_id(values["customer_id"], values["merchant_id"], values["item_hash"])
        if existing_id is not None:
            return self._merge(existing_id, values["quantity"], actor)

        item = CartItem(**values)
        self.db.add(item)
        try:
            self.db.commit()
        except sa_exc.IntegrityError as error:
            # A concurrent request stored the same line between our lookup and insert
            self.db.rollback()
            existing_id = self._find_line_id(values["customer_id"], values["merchant_id"], values["item_hash"])
            if existing_id is None:
                raise self._constraint_violation(error) from error
            return self._merge(existing_id, values["quantity"], actor)

        self.db.refresh(item)
        logger.info(
            "Cart item %s created for customer %s at merchant %s (qty %s) by %s",
            item.id, item.customer_id, item.merchant_id, item.quantity, self._actor_label(actor)
        )
        return CartLineResult(outcome=CREATED, item=item)

    def update(self, item_id: str, changes: CartItemUpdate, actor: Optional[Account] = None) -> CartItem:
        item = get_cart_item(self.db, item_id)
        patch = _field_values(changes, changes.model_fields_set)
        for name in REQUIRED_FIELDS:
            if name in patch and patch[name] is None:
                if name == "quantity":
                    raise ValidationError("Quantity is required")
                del patch[name]

        values = {column: getattr(item, column) for column in (
            "customer_id", "merchant_id", "product_id", "merchant_product_id", "quantity",
            "price_at_add", "compare_at_price", "product_size", "selected_variation_id",
            "selected_modifiers", "selected_addons", "special_instructions", "notes_for_rider",
        )}
        values.update(patch)
        values["selected_modifiers"] = values["selected_modifiers"] or []
        values["selected_addons"] = values["selected_addons"] or []

        self._validate(values)
        self._round_prices(values)

        references_changed = any(
            name in patch and patch[name] != getattr(item, name)
            for name in ("merchant_id", "product_id", "merchant_product_id")
        )
        if references_changed:
            self._check_vendor_integrity(values["merchant_id"], values["product_id"], values["merchant_product_id"])
        if "selected_variation_id" in patch and patch["selected_variation_id"] != item.selected_variation_id:
            self._require_variation(values["selected_variation_id"])

        values["expires_at"] = self._expiry()
        values["item_hash"] = self._fingerprint(values)
        values["subtotal"] = self._subtotal(values)

        for name, value in values.items():
            setattr(item, name, value)
        try:
            self.db.commit()
        except sa_exc.IntegrityError as error:
            self.db.rollback()
            duplicate_id = self._find_line_id(values["customer_id"], values["merchant_id"], values["item_hash"])
            if duplicate_id is None:
                raise self._constraint_violation(error) from error
            raise IntegrityError(
                "An identical cart line already exists for this customer and merchant",
                details={"id": duplicate_id}
            ) from error

        self.db.refresh(item)
        logger.info("Cart item %s updated by %s", item.id, self._actor_label(actor))
        return item

    # Steps

    def _validate(self, values: Dict[str, Any]) -> None:
        quantity = values.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or not (
            self.min_quantity <= quantity <= self.max_quantity
        ):
            raise ValidationError(
                f"Quantity must be between {self.min_quantity} and {self.max_quantity}",
                details={"quantity": quantity}
            )

        price_at_add = values.get("price_at_add")
        if price_at_add is None or Decimal(str(price_at_add)) < 0:
            raise ValidationError("Price cannot be negative", details={"price_at_add": str(price_at_add)})

        compare_at_price = values.get("compare_at_price")
        if compare_at_price is not None and Decimal(str(compare_at_price)) < 0:
            raise ValidationError("Compare-at price cannot be negative", details={"compare_at_price": str(compare_at_price)})

        if len(values.get("special_instructions") or "") > self.instructions_max_length:
            raise ValidationError(f"Special instructions cannot exceed {self.instructions_max_length} characters")

        if len(values.get("notes_for_rider") or "") > self.rider_notes_max_length:
            raise ValidationError(f"Notes for rider cannot exceed {self.rider_notes_max_length} characters")

    @staticmethod
    def _round_prices(values: Dict[str, Any]) -> None:
        # Subtotals are derived from the stored cents, never from extra client precision
        values["price_at_add"] = to_money(values["price_at_add"])
        values["compare_at_price"] = to_money(values.get("compare_at_price"))

    def _expiry(self) -> datetime:
        return self.clock() + timedelta(days=self.expiry_days)

    @staticmethod
    def _fingerprint(values: Dict[str, Any]) -> str:
        return compute_item_hash(
            product_id=values["product_id"],
            merchant_product_id=values["merchant_product_id"],
            product_size=values.get("product_size"),
            selected_modifiers=values.get("selected_modifiers"),
            selected_addons=values.get("selected_addons"),
            selected_variation_id=values.get("selected_variation_id"),
            special_instructions=values.get("special_instructions"),
        )

    @staticmethod
    def _subtotal(values: Dict[str, Any]) -> Decimal:
        subtotal = calculate_subtotal(
            values.get("price_at_add"),
            values.get("quantity"),
            values.get("selected_modifiers"),
            values.get("selected_addons"),
        )
        return subtotal if subtotal is not None else Decimal("0.00")

    def _find_line_id(self, customer_id: str, merchant_id: str, item_hash: str) -> Optional[str]:
        row = self.db.query(CartItem.id).filter(
            CartItem.customer_id == customer_id,
            CartItem.merchant_id == merchant_id,
            CartItem.item_hash == item_hash
        ).first()
        return row[0] if row else None

    def _merge(self, existing_id: str, incoming_quantity: int, actor: Optional[Account]) -> CartLineResult:
        """Add the incoming quantity to an existing line in a single UPDATE statement"""
        now = self.clock()
        result = self.db.execute(
            update(CartItem)
            .where(
                CartItem.id == existing_id,
                CartItem.quantity + incoming_quantity <= self.max_quantity
            )
            .values(
                quantity=CartItem.quantity + incoming_quantity,
                expires_at=now + timedelta(days=self.expiry_days),
                updated_at=now
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            if self.db.get(CartItem, existing_id) is None:
                raise NotFoundException(f"Cart item {existing_id} no longer exists")
            raise ValidationError(
                f"Quantity must be between {self.min_quantity} and {self.max_quantity}",
                details={"id": existing_id, "incoming_quantity": incoming_quantity}
            )

        # Lock the row while the subtotal is re-derived from the new quantity
        item = (
            self.db.query(CartItem)
            .populate_existing()
            .with_for_update()
            .filter(CartItem.id == existing_id)
            .one()
        )
        item.subtotal = self._subtotal({
            "price_at_add": item.price_at_add,
            "quantity": item.quantity,
            "selected_modifiers": item.selected_modifiers,
            "selected_addons": item.selected_addons,
        })
        self.db.commit()
        self.db.refresh(item)

        logger.info(
            "Cart item merged into %s (+%s, now %s) by %s",
            existing_id, incoming_quantity, item.quantity, self._actor_label(actor)
        )
        return CartLineResult(outcome=MERGED, item=item)

    def _require_customer(self, customer_id: str) -> None:
        if self.db.get(Customer, customer_id) is None:
            raise NotFoundException(f"Customer {customer_id} not found")

    def _require_variation(self, variation_id: Optional[str]) -> None:
        if variation_id is not None and self.db.get(Product, variation_id) is None:
            raise NotFoundException(f"Product variation {variation_id} not found")

    def _check_vendor_integrity(self, merchant_id: str, product_id: str, merchant_product_id: str) -> None:
        merchant = self.db.get(Merchant, merchant_id)
        if merchant is None:
            raise NotFoundException(f"Merchant {merchant_id} not found")

        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFoundException(f"Product {product_id} not found")

        if merchant.vendor_id != product.created_by_vendor_id:
            logger.warning(
                "Rejected cart item: product %s (vendor %s) at merchant %s (vendor %s)",
                product.id, product.created_by_vendor_id, merchant.id, merchant.vendor_id
            )
            raise IntegrityError(
                f'Cannot add product "{product.name}" (vendor {product.created_by_vendor_id}) '
                f'to cart for merchant "{merchant.outlet_name}" (vendor {merchant.vendor_id}). '
                f"Product must belong to merchant's vendor.",
                details={"product_id": product.id, "merchant_id": merchant.id}
            )

        merchant_product = self.db.get(MerchantProduct, merchant_product_id)
        if merchant_product is None:
            raise NotFoundException(f"Merchant product {merchant_product_id} not found")

        if merchant_product.merchant_id != merchant.id or merchant_product.product_id != product.id:
            raise IntegrityError(
                f"Merchant product {merchant_product_id} does not link product {product.id} to merchant {merchant.id}",
                details={"merchant_product_id": merchant_product_id}
            )

    @staticmethod
    def _constraint_violation(error: sa_exc.IntegrityError) -> IntegrityError:
        logger.warning("Cart item rejected by a database constraint: %s", error.orig)
        return IntegrityError("Cart item conflicts with existing records and was not saved")

    @staticmethod
    def _actor_label(actor: Optional[Account]) -> str:
        return actor.email if actor is not None else "system"


def get_cart_item(db: Session, item_id: str) -> CartItem:
    item = db.get(CartItem, item_id)
    if item is None:
        raise NotFoundException(f"Cart item {item_id} not found")
    return item


def list_cart_items(db: Session, customer_id: str, merchant_id: Optional[str] = None) -> List[CartItem]:
    """Cart lines for a customer, oldest first"""
    query = db.query(CartItem).filter(CartItem.customer_id == customer_id)
    if merchant_id:
        query = query.filter(CartItem.merchant_id == merchant_id)
    return query.order_by(CartItem.created_at.asc()).all()


def delete_cart_item(db: Session, item_id: str) -> None:
    item = get_cart_item(db, item_id)
    db.delete(item)
    db.commit()
    logger.info("Removed cart item %s", item_id)


def clear_cart(db: Session, customer_id: str, merchant_id: Optional[str] = None) -> int:
    """Delete every line of a customer's cart, optionally for one merchant only"""
    query = db.query(CartItem).filter(CartItem.customer_id == customer_id)
    if merchant_id:
        query = query.filter(CartItem.merchant_id == merchant_id)
    deleted = query.delete(synchronize_session=False)
    db.commit()
    logger.info("Cleared %s cart item(s) for customer %s", deleted, customer_id)
    return deleted


def get_cart_summary(db: Session, customer_id: str, merchant_id: Optional[str] = None) -> dict:
    """Calculate cart summary"""
    items = list_cart_items(db, customer_id, merchant_id)

    total = sum((Decimal(str(item.subtotal or 0)) for item in items), Decimal("0.00"))

    return {
        "line_count": len(items),
        "item_count": sum(item.quantity for item in items),
        "total": float(total),
        "unavailable_count": sum(1 for item in items if not item.is_available)
    }


def purge_expired_cart_items(db: Session, now: Optional[datetime] = None) -> int:
    """Delete lines whose sliding expiry has passed"""
    cutoff = now or datetime.utcnow()
    deleted = db.query(CartItem).filter(
        CartItem.expires_at.isnot(None),
        CartItem.expires_at < cutoff
    ).delete(synchronize_session=False)
    db.commit()
    logger.info("Purged %s expired cart item(s)", deleted)
    return deleted
