from typing import Optional
from datetime import datetime, timezone
from sqlmodel import Field, SQLModel
from enum import Enum

class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

class Coupon(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Coupon Details
    code: str = Field(unique=True, index=True)  # stored upper-case, e.g. "SAVE10"

    # Discount
    discount_type: DiscountType = Field(default=DiscountType.PERCENTAGE)
    discount_value: float = Field(ge=0)  # Percentage (0-100) or fixed amount

    # Eligibility
    min_order_amount: float = Field(default=0, ge=0)

    # Usage Limits
    max_uses: int = Field(default=100, ge=1)
    used_count: int = Field(default=0, ge=0)

    # Validity (UTC); the coupon is invalid at or after this instant
    expires_at: datetime

    # Status
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
