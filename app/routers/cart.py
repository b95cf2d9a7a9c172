from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from app.routers.coupons import get_coupon_service, raise_for_result
from app.services.cart import CartItem, CartItemCreate, CartRepository
from app.services.coupon import AppliedCoupon, CouponService
from app.services.pricing import CheckoutSummary, PaymentMethod, checkout_summary
from app.services.storage import KeyValueStorage, get_storage

router = APIRouter()

class CartItemUpdate(BaseModel):
    quantity: int

class CouponCode(BaseModel):
    code: str

class CartResponse(BaseModel):
    items: List[CartItem]
    count: int
    subtotal: float
    applied_coupon: Optional[AppliedCoupon] = None

def get_cart_repository(owner: str, storage: KeyValueStorage = Depends(get_storage)) -> CartRepository:
    return CartRepository(storage, owner)

def cart_response(cart: CartRepository) -> CartResponse:
    items = cart.items()
    return CartResponse(
        items=items,
        count=sum(item.quantity for item in items),
        subtotal=sum(item.line_total for item in items),
        applied_coupon=cart.applied_coupon(),
    )

@router.get("/{owner}", response_model=CartResponse)
def get_cart(cart: CartRepository = Depends(get_cart_repository)):
    """Get cart items, count, subtotal and applied coupon"""
    return cart_response(cart)

@router.post("/{owner}/items", response_model=CartItem)
def add_to_cart(data: CartItemCreate, cart: CartRepository = Depends(get_cart_repository)):
    """Add item to cart"""
    return cart.add(data)

@router.put("/{owner}/items/{item_id}", response_model=CartResponse)
def update_cart_item(item_id: str, data: CartItemUpdate, cart: CartRepository = Depends(get_cart_repository)):
    """Update item quantity; a quantity below 1 removes the item"""
    cart.update_quantity(item_id, data.quantity)
    return cart_response(cart)

@router.delete("/{owner}/items/{item_id}", response_model=CartResponse)
def remove_from_cart(item_id: str, cart: CartRepository = Depends(get_cart_repository)):
    """Remove item from cart"""
    cart.remove(item_id)
    return cart_response(cart)

@router.delete("/{owner}")
def clear_cart(cart: CartRepository = Depends(get_cart_repository)):
    """Clear entire cart and its coupon"""
    cart.clear()
    return {"message": "Cart cleared"}

@router.post("/{owner}/coupon", response_model=CartResponse)
def apply_cart_coupon(
    data: CouponCode,
    cart: CartRepository = Depends(get_cart_repository),
    coupons: CouponService = Depends(get_coupon_service)
):
    """Validate a coupon against the cart subtotal and keep it on the cart"""
    applied = raise_for_result(coupons.apply(data.code, cart.total()))
    cart.set_coupon(applied)
    return cart_response(cart)

@router.delete("/{owner}/coupon", response_model=CartResponse)
def remove_cart_coupon(cart: CartRepository = Depends(get_cart_repository)):
    cart.remove_coupon()
    return cart_response(cart)

@router.get("/{owner}/summary", response_model=CheckoutSummary)
def get_checkout_summary(
    payment_method: PaymentMethod = Query(PaymentMethod.RAZORPAY),
    cart: CartRepository = Depends(get_cart_repository)
):
    """Totals for the checkout page, including payment-method discounts"""
    applied = cart.applied_coupon()
    coupon_discount = applied.discount_amount if applied else 0
    return checkout_summary(cart.total(), coupon_discount, payment_method)
