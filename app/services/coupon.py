"""
Coupon validation and discount computation.

`evaluate` and `recompute` are pure: they take a coupon (or an already applied
coupon), a cart total and an instant, and never touch the store. Expected
validation failures come back as a `CouponResult` with an error kind instead
of an exception. `CouponService` is the store-facing side: lookups by code,
the "available coupons" listing and usage redemption.
"""
from typing import List, Optional, Union
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel
from sqlalchemy import desc, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from app.core.config import settings
from app.core.logging import get_logger
from app.core.money import Number, round_half_up
from app.models.coupon import Coupon, DiscountType

logger = get_logger("coupons")

Instant = Union[datetime, str]


class CouponErrorKind(str, Enum):
    INVALID_CODE = "invalid_code"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    BELOW_MINIMUM = "below_minimum"


class CouponStoreError(Exception):
    """The coupon store could not be read or written."""


class AppliedCoupon(BaseModel):
    code: str
    discount_type: DiscountType
    discount_value: float
    discount_amount: float


class CouponResult(BaseModel):
    ok: bool
    applied: Optional[AppliedCoupon] = None
    error: Optional[CouponErrorKind] = None
    shortfall: Optional[float] = None
    message: str = ""

    @classmethod
    def success(cls, applied: AppliedCoupon) -> "CouponResult":
        return cls(
            ok=True,
            applied=applied,
            message=f"You saved ₹{_format_amount(applied.discount_amount)}!",
        )

    @classmethod
    def failure(cls, error: CouponErrorKind, message: str, shortfall: Optional[float] = None) -> "CouponResult":
        return cls(ok=False, error=error, message=message, shortfall=shortfall)


class AvailableCoupon(BaseModel):
    code: str
    discount_type: DiscountType
    discount_value: float
    min_order_amount: float
    expires_at: datetime
    eligible: bool
    shortfall: float


def _format_amount(amount: Number) -> str:
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def to_utc(value: Instant) -> datetime:
    """Normalise an ISO-8601 string or datetime to an aware UTC datetime; naive values are UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def compute_discount(discount_type: DiscountType, discount_value: float, cart_total: Number) -> float:
    """Discount for a cart total, never more than the total itself."""
    if discount_type == DiscountType.PERCENTAGE:
        discount_amount = round_half_up(cart_total * discount_value / 100)
    else:
        discount_amount = discount_value
    return min(discount_amount, cart_total)


def evaluate(coupon: Optional[Coupon], cart_total: Number, now: Instant) -> CouponResult:
    """Validate a coupon against a cart total at `now`. Checks short-circuit in a fixed order."""
    if coupon is None or not coupon.is_active:
        return CouponResult.failure(
            CouponErrorKind.INVALID_CODE,
            "This coupon code is not valid or has expired",
        )

    if to_utc(now) >= to_utc(coupon.expires_at):
        return CouponResult.failure(CouponErrorKind.EXPIRED, "This coupon has expired")

    if coupon.used_count >= coupon.max_uses:
        return CouponResult.failure(
            CouponErrorKind.USAGE_LIMIT_REACHED,
            "This coupon has reached its maximum usage limit",
        )

    if cart_total < coupon.min_order_amount:
        shortfall = coupon.min_order_amount - cart_total
        return CouponResult.failure(
            CouponErrorKind.BELOW_MINIMUM,
            f"Add ₹{_format_amount(shortfall)} more to use this coupon",
            shortfall=shortfall,
        )

    applied = AppliedCoupon(
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        discount_amount=compute_discount(coupon.discount_type, coupon.discount_value, cart_total),
    )
    return CouponResult.success(applied)


def recompute(applied: AppliedCoupon, new_cart_total: Number) -> AppliedCoupon:
    """Re-derive the discount after a cart edit. Eligibility is not re-checked here."""
    discount_amount = compute_discount(applied.discount_type, applied.discount_value, new_cart_total)
    return applied.model_copy(update={"discount_amount": discount_amount})


class CouponService:
    def __init__(self, session: Session):
        self.session = session

    def get_by_code(self, code: str) -> Optional[Coupon]:
        """Case-insensitive exact match on the coupon code."""
        normalized = normalize_code(code)
        if not normalized:
            return None
        try:
            return self.session.exec(
                select(Coupon).where(func.upper(Coupon.code) == normalized)
            ).first()
        except SQLAlchemyError as e:
            logger.error("Coupon lookup failed for %s: %s", normalized, e)
            raise CouponStoreError("Failed to load coupon") from e

    def apply(self, code: str, cart_total: Number, now: Optional[Instant] = None) -> CouponResult:
        if not normalize_code(code):
            return CouponResult.failure(CouponErrorKind.INVALID_CODE, "Please enter a coupon code")

        coupon = self.get_by_code(code)
        result = evaluate(coupon, cart_total, now or datetime.now(timezone.utc))
        if result.ok:
            logger.info("Coupon %s applied, discount %s", result.applied.code, result.applied.discount_amount)
        else:
            logger.info("Coupon %s rejected: %s", normalize_code(code), result.error.value)
        return result

    def list_available(self, cart_total: Number = 0, now: Optional[Instant] = None) -> List[AvailableCoupon]:
        """Active, unexpired coupons, biggest discount value first."""
        cutoff = to_utc(now or datetime.now(timezone.utc))
        try:
            coupons = self.session.exec(
                select(Coupon)
                .where(Coupon.is_active == True)  # noqa: E712
                .where(Coupon.expires_at > cutoff)
                .order_by(desc(Coupon.discount_value))
            ).all()
        except SQLAlchemyError as e:
            logger.error("Listing available coupons failed: %s", e)
            raise CouponStoreError("Failed to load coupons") from e

        return [
            AvailableCoupon(
                code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                min_order_amount=coupon.min_order_amount,
                expires_at=coupon.expires_at,
                eligible=cart_total >= coupon.min_order_amount,
                shortfall=max(0, coupon.min_order_amount - cart_total),
            )
            for coupon in coupons
        ]

    def redeem(self, code: str) -> bool:
        """
        Record one use of a coupon after a completed checkout.

        With COUPON_ATOMIC_REDEMPTION the increment is a single conditional
        UPDATE guarded by max_uses, so concurrent redemptions cannot push
        used_count past the cap. Otherwise the count is read and written back,
        which can overshoot under concurrency.

        Returns:
            True if used_count was incremented
        """
        normalized = normalize_code(code)
        try:
            if settings.COUPON_ATOMIC_REDEMPTION:
                result = self.session.execute(
                    update(Coupon)
                    .where(func.upper(Coupon.code) == normalized)
                    .where(Coupon.used_count < Coupon.max_uses)
                    .values(used_count=Coupon.used_count + 1, updated_at=datetime.now(timezone.utc))
                    .execution_options(synchronize_session=False)
                )
                redeemed = bool(result.rowcount)
                self.session.commit()
            else:
                coupon = self.get_by_code(normalized)
                redeemed = coupon is not None
                if coupon:
                    coupon.used_count += 1
                    coupon.updated_at = datetime.now(timezone.utc)
                    self.session.add(coupon)
                    self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Redeeming coupon %s failed: %s", normalized, e)
            raise CouponStoreError("Failed to record coupon usage") from e

        if redeemed:
            logger.info("Coupon %s redeemed", normalized)
        else:
            logger.warning("Coupon %s not redeemed (unknown code or usage cap reached)", normalized)
        return redeemed
