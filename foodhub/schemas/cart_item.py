from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from foodhub.config import settings
from foodhub.models.cart_item import ProductSize


class CamelModel(BaseModel):
    # Accept both snake_case and the camelCase the web apps send
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ModifierSelection(CamelModel):
    group_id: Optional[str] = None
    option_id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)


class AddonSelection(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=1)


class CartItemCreate(CamelModel):
    customer_id: str
    merchant_id: str
    product_id: str
    merchant_product_id: str
    quantity: int = 1
    price_at_add: Decimal
    compare_at_price: Optional[Decimal] = None
    product_size: Optional[ProductSize] = None
    selected_variation_id: Optional[str] = None
    selected_modifiers: List[ModifierSelection] = []
    selected_addons: List[AddonSelection] = []
    special_instructions: Optional[str] = Field(default=None, max_length=settings.SPECIAL_INSTRUCTIONS_MAX_LENGTH)
    notes_for_rider: Optional[str] = Field(default=None, max_length=settings.NOTES_FOR_RIDER_MAX_LENGTH)
    is_available: bool = True
    unavailable_reason: Optional[str] = None
    session_id: Optional[str] = None


class CartItemUpdate(CamelModel):
    """price_at_add is a snapshot and cannot be changed after creation"""
    merchant_id: Optional[str] = None
    product_id: Optional[str] = None
    merchant_product_id: Optional[str] = None
    quantity: Optional[int] = None
    compare_at_price: Optional[Decimal] = None
    product_size: Optional[ProductSize] = None
    selected_variation_id: Optional[str] = None
    selected_modifiers: Optional[List[ModifierSelection]] = None
    selected_addons: Optional[List[AddonSelection]] = None
    special_instructions: Optional[str] = Field(default=None, max_length=settings.SPECIAL_INSTRUCTIONS_MAX_LENGTH)
    notes_for_rider: Optional[str] = Field(default=None, max_length=settings.NOTES_FOR_RIDER_MAX_LENGTH)
    is_available: Optional[bool] = None
    unavailable_reason: Optional[str] = None


class CartItemResponse(BaseModel):
    id: str
    customer_id: str
    merchant_id: str
    product_id: str
    merchant_product_id: str
    quantity: int
    price_at_add: float
    compare_at_price: Optional[float] = None
    subtotal: float
    product_size: Optional[str] = None
    selected_variation_id: Optional[str] = None
    selected_modifiers: Optional[List[dict]] = None
    selected_addons: Optional[List[dict]] = None
    special_instructions: Optional[str] = None
    notes_for_rider: Optional[str] = None
    item_hash: str
    is_available: bool
    unavailable_reason: Optional[str] = None
    expires_at: Optional[datetime] = None
    session_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CartSummary(BaseModel):
    line_count: int = 0
    item_count: int = 0
    total: float = 0.0
    unavailable_count: int = 0
