import uuid
from typing import List, Optional
from fastapi import HTTPException
from pydantic import BaseModel, Field
from app.core.logging import get_logger
from app.services.coupon import AppliedCoupon, recompute
from app.services.storage import KeyValueStorage

logger = get_logger("cart")

CART_STORAGE_KEY = "printdukan_cart"
COUPON_STORAGE_KEY = "printdukan_coupon"


class CartItem(BaseModel):
    id: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    product_image: Optional[str] = None
    category: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    selected_size: Optional[str] = None
    selected_frame: Optional[str] = None
    custom_image_url: Optional[str] = None
    custom_text: Optional[str] = None
    unit_price: float = Field(ge=0)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class CartItemCreate(BaseModel):
    product_id: Optional[str] = None
    product_name: str
    product_image: Optional[str] = None
    category: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    selected_size: Optional[str] = None
    selected_frame: Optional[str] = None
    custom_image_url: Optional[str] = None
    custom_text: Optional[str] = None
    unit_price: float = Field(ge=0)


class CartRepository:
    """A shopper's cart plus the coupon currently applied to it."""

    def __init__(self, storage: KeyValueStorage, owner: str):
        self.storage = storage
        self.owner = owner

    @property
    def _cart_key(self) -> str:
        return f"{CART_STORAGE_KEY}:{self.owner}"

    @property
    def _coupon_key(self) -> str:
        return f"{COUPON_STORAGE_KEY}:{self.owner}"

    def items(self) -> List[CartItem]:
        stored = self.storage.get(self._cart_key) or []
        return [CartItem(**item) for item in stored]

    def _save(self, items: List[CartItem]) -> None:
        self.storage.set(self._cart_key, [item.model_dump() for item in items])
        self._refresh_coupon(items)

    def total(self) -> float:
        return sum(item.line_total for item in self.items())

    def count(self) -> int:
        return sum(item.quantity for item in self.items())

    def add(self, data: CartItemCreate) -> CartItem:
        """Add an item, merging with an existing line for the same product, size and frame."""
        items = self.items()

        existing = None
        if data.product_id:
            existing = next(
                (
                    item for item in items
                    if item.product_id == data.product_id
                    and item.selected_size == (data.selected_size or None)
                    and item.selected_frame == (data.selected_frame or None)
                ),
                None,
            )

        if existing:
            existing.quantity += data.quantity
            item = existing
        else:
            item = CartItem(
                id=f"cart_{uuid.uuid4().hex[:12]}",
                **data.model_dump(exclude={"selected_size", "selected_frame"}),
                selected_size=data.selected_size or None,
                selected_frame=data.selected_frame or None,
            )
            items.append(item)

        self._save(items)
        logger.debug("Cart %s: added %s x%s", self.owner, item.product_name, data.quantity)
        return item

    def update_quantity(self, item_id: str, quantity: int) -> Optional[CartItem]:
        """Set a line's quantity; anything below 1 removes the line."""
        if quantity < 1:
            self.remove(item_id)
            return None

        items = self.items()
        item = next((item for item in items if item.id == item_id), None)
        if not item:
            raise HTTPException(status_code=404, detail="Cart item not found")

        item.quantity = quantity
        self._save(items)
        return item

    def remove(self, item_id: str) -> None:
        items = self.items()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            raise HTTPException(status_code=404, detail="Cart item not found")
        self._save(remaining)

    def clear(self) -> None:
        self.storage.delete(self._cart_key)
        self.storage.delete(self._coupon_key)

    # Applied coupon

    def applied_coupon(self) -> Optional[AppliedCoupon]:
        stored = self.storage.get(self._coupon_key)
        return AppliedCoupon(**stored) if stored else None

    def set_coupon(self, applied: AppliedCoupon) -> None:
        self.storage.set(self._coupon_key, applied.model_dump(mode="json"))

    def remove_coupon(self) -> None:
        self.storage.delete(self._coupon_key)

    def _refresh_coupon(self, items: List[CartItem]) -> None:
        applied = self.applied_coupon()
        if applied:
            self.set_coupon(recompute(applied, sum(item.line_total for item in items)))
