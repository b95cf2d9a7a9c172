"""Display prices, perceived-discount badges and checkout totals."""
from enum import Enum
from typing import Iterable, Optional
from pydantic import BaseModel
from app.core.config import settings
from app.core.money import Number, round_half_up
from app.models.product import PricedOption


class PaymentMethod(str, Enum):
    RAZORPAY = "razorpay"
    COD = "cod"


class DisplayPrice(BaseModel):
    final_price: float
    original_price: int  # cosmetic "was" price, never persisted
    discount_percent: int


class CheckoutSummary(BaseModel):
    subtotal: float
    coupon_discount: float
    online_discount: int
    shipping: float
    total: float
    payment_method: PaymentMethod
    advance_amount: Optional[float] = None
    balance_due: Optional[float] = None


def compute_display_price(
    base_price: Number,
    size_delta: Number = 0,
    variant_delta: Number = 0,
    markup_factor: float = settings.DETAIL_MARKUP_FACTOR,
) -> DisplayPrice:
    final_price = base_price + (size_delta or 0) + (variant_delta or 0)
    original_price = round_half_up(final_price * markup_factor)
    if original_price == 0:
        discount_percent = 0
    else:
        discount_percent = round_half_up((original_price - final_price) / original_price * 100)
    return DisplayPrice(
        final_price=final_price,
        original_price=original_price,
        discount_percent=discount_percent,
    )


def option_delta(options: Iterable[PricedOption], name: Optional[str]) -> float:
    """Price delta of the named option; 0 when nothing (or an unknown name) is selected."""
    if not name:
        return 0
    for option in options:
        if option.name == name:
            return option.price or 0
    return 0


def default_option(options: Iterable[PricedOption]) -> Optional[str]:
    for option in options:
        return option.name
    return None


def checkout_summary(
    subtotal: Number,
    coupon_discount: Number = 0,
    payment_method: PaymentMethod = PaymentMethod.RAZORPAY,
) -> CheckoutSummary:
    # Online payments get a further percentage off what is left after the coupon
    online_discount = 0
    if payment_method == PaymentMethod.RAZORPAY:
        online_discount = round_half_up(
            (subtotal - coupon_discount) * settings.ONLINE_PAYMENT_DISCOUNT_PERCENT / 100
        )

    shipping = settings.SHIPPING_COST
    total = subtotal - coupon_discount - online_discount + shipping

    summary = CheckoutSummary(
        subtotal=subtotal,
        coupon_discount=coupon_discount,
        online_discount=online_discount,
        shipping=shipping,
        total=total,
        payment_method=payment_method,
    )
    if payment_method == PaymentMethod.COD:
        summary.advance_amount = settings.COD_ADVANCE_AMOUNT
        summary.balance_due = max(0, total - settings.COD_ADVANCE_AMOUNT)
    return summary
