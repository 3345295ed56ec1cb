"""
Cart Item Endpoints
Used by the customer apps' backends (service accounts) and by admins
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from foodhub.api.deps import require_admin, require_cart_operator
from foodhub.database import get_db
from foodhub.models.account import Account
from foodhub.schemas.cart_item import CartItemCreate, CartItemResponse, CartItemUpdate, CartSummary
from foodhub.schemas.common import ResponseModel
from foodhub.services.cart_service import (
    CartLineResolver,
    clear_cart,
    delete_cart_item,
    get_cart_item,
    get_cart_summary,
    list_cart_items,
    purge_expired_cart_items,
)

router = APIRouter()


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def add_cart_item(
    item_data: CartItemCreate,
    response: Response,
    current_account: Account = Depends(require_cart_operator),
    db: Session = Depends(get_db)
):
    """Add a line to a customer's cart, merging into an identical line when one exists"""
    result = CartLineResolver(db).create(item_data, actor=current_account)

    if result.merged:
        response.status_code = status.HTTP_200_OK
        return ResponseModel(
            success=True,
            data={
                "merged": True,
                "id": result.item.id,
                "item": CartItemResponse.model_validate(result.item)
            },
            message="Item merged into existing cart line"
        )

    return ResponseModel(
        success=True,
        data={
            "merged": False,
            "id": result.item.id,
            "item": CartItemResponse.model_validate(result.item)
        },
        message="Item added to cart"
    )


@router.get("", response_model=ResponseModel)
def get_cart_items(
    customer_id: str = Query(...),
    merchant_id: Optional[str] = Query(None),
    current_account: Account = Depends(require_cart_operator),
    db: Session = Depends(get_db)
):
    """List a customer's cart lines"""
    items = list_cart_items(db, customer_id, merchant_id)
    return ResponseModel(
        success=True,
        data={
            "items": [CartItemResponse.model_validate(item) for item in items],
            "summary": CartSummary(**get_cart_summary(db, customer_id, merchant_id))
        }
    )


@router.get("/summary", response_model=ResponseModel)
def get_summary(
    customer_id: str = Query(...),
    merchant_id: Optional[str] = Query(None),
    current_account: Account = Depends(require_cart_operator),
    db: Session = Depends(get_db)
):
    """Totals for a customer's cart"""
    return ResponseModel(
        success=True,
        data=CartSummary(**get_cart_summary(db, customer_id, merchant_id))
    )


@router.post("/purge-expired", response_model=ResponseModel)
def purge_expired(
    current_account: Account = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Delete cart lines past their expiry date"""
    deleted = purge_expired_cart_items(db)
    return ResponseModel(success=True, data={"deleted": deleted}, message=f"Purged {deleted} expired cart item(s)")


@router.delete("", response_model=ResponseModel)
def clear_customer_cart(
    customer_id: str = Query(...),
    merchant_id: Optional[str] = Query(None),
    current_account: Account = Depends(require_cart_operator),
    db: Session = Depends(get_db)
):
    """Remove all lines from a customer's cart"""
    deleted = clear_cart(db, customer_id, merchant_id)
    return ResponseModel(success=True, data={"deleted": deleted}, message="Cart cleared")


@router.get("/{item_id}", response_model=ResponseModel)
def get_item(
    item_id: str,
    current_account: Account = Depends(require_cart_operator),
    db: Session = Depends(get_db)
):
    """Get a single cart line"""
    return ResponseModel(success=True, data=CartItemResponse.model_validate(get_cart_item(db, item_id)))


@router.patch("/{item_id}", response_model=ResponseModel)
def update_item(
    item_id: str,
    changes: CartItemUpdate,
    current_account: Account = Depends(require_cart_operator),
    db: Session = Depends(get_db)
):
    """Change quantity or customization of a cart line"""
    item = CartLineResolver(db).update(item_id, changes, actor=current_account)
    return ResponseModel(
        success=True,
        data=CartItemResponse.model_validate(item),
        message="Cart item updated"
    )


@router.delete("/{item_id}", response_model=ResponseModel)
def remove_item(
    item_id: str,
    current_account: Account = Depends(require_cart_operator),
    db: Session = Depends(get_db)
):
    """Remove a cart line"""
    delete_cart_item(db, item_id)
    return ResponseModel(success=True, message="Item removed from cart")
