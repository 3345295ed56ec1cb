"""
Cart Item Model
One row per distinct customer + merchant + customization combination
"""
from sqlalchemy import (
    Column, String, Integer, Numeric, Boolean, Text, DateTime, ForeignKey, JSON,
    CheckConstraint, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
import uuid
import enum
from datetime import datetime
from foodhub.database import Base


class ProductSize(str, enum.Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)
    merchant_id = Column(String(36), ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    merchant_product_id = Column(String(36), ForeignKey("merchant_products.id", ondelete="CASCADE"), nullable=False)

    # Quantity & pricing
    quantity = Column(Integer, default=1, nullable=False)
    price_at_add = Column(Numeric(10, 2), nullable=False)  # Snapshot, never follows catalog changes
    compare_at_price = Column(Numeric(10, 2), nullable=True)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)

    # Customization
    product_size = Column(String(20), nullable=True)
    selected_variation_id = Column(String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    selected_modifiers = Column(JSON, nullable=True)  # [{groupId, optionId, name, price}]
    selected_addons = Column(JSON, nullable=True)  # [{id, name, price, quantity}]
    special_instructions = Column(Text, nullable=True)
    notes_for_rider = Column(Text, nullable=True)

    # Duplicate detection
    item_hash = Column(String(32), nullable=False)

    # Availability snapshot
    is_available = Column(Boolean, default=True, nullable=False)
    unavailable_reason = Column(String(255), nullable=True)

    # Expiration & guest carts
    expires_at = Column(DateTime, nullable=True)
    session_id = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("customer_id", "merchant_id", "item_hash", name="uq_cart_items_customer_merchant_hash"),
        CheckConstraint("quantity >= 1 AND quantity <= 999", name="check_cart_item_quantity_range"),
        CheckConstraint("price_at_add >= 0", name="check_cart_item_price_non_negative"),
        Index("ix_cart_items_customer_merchant", "customer_id", "merchant_id"),
        Index("ix_cart_items_customer_hash", "customer_id", "item_hash"),
        Index("ix_cart_items_item_hash", "item_hash"),
        Index("ix_cart_items_updated_at", "updated_at"),
        Index("ix_cart_items_expires_at", "expires_at"),
    )

    # Relationships
    customer = relationship("Customer", back_populates="cart_items")
    merchant = relationship("Merchant")
    product = relationship("Product", foreign_keys=[product_id])
    merchant_product = relationship("MerchantProduct")
    selected_variation = relationship("Product", foreign_keys=[selected_variation_id])

    def __repr__(self):
        return f'<CartItem(customer_id={self.customer_id}, merchant_id={self.merchant_id}, quantity={self.quantity})>'
