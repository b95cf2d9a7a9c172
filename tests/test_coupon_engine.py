from datetime import datetime, timezone

import pytest

from app.models.coupon import Coupon, DiscountType
from app.services.coupon import (
    AppliedCoupon,
    CouponErrorKind,
    compute_discount,
    evaluate,
    recompute,
)

NOW = "2024-01-01"


def coupon(**overrides) -> Coupon:
    values = dict(
        code="SAVE10",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=10,
        min_order_amount=999,
        max_uses=100,
        used_count=50,
        expires_at=datetime(2099, 1, 1),
        is_active=True,
    )
    values.update(overrides)
    return Coupon(**values)


def test_percentage_coupon_on_qualifying_cart():
    result = evaluate(coupon(), 1200, NOW)

    assert result.ok
    assert result.error is None
    assert result.applied.code == "SAVE10"
    assert result.applied.discount_type == DiscountType.PERCENTAGE
    assert result.applied.discount_value == 10
    assert result.applied.discount_amount == 120
    assert "120" in result.message


def test_missing_coupon_is_invalid_code():
    result = evaluate(None, 1200, NOW)
    assert not result.ok
    assert result.error == CouponErrorKind.INVALID_CODE
    assert result.applied is None


def test_inactive_coupon_is_invalid_even_if_otherwise_expired():
    result = evaluate(coupon(is_active=False, expires_at=datetime(2000, 1, 1)), 1200, NOW)
    assert result.error == CouponErrorKind.INVALID_CODE


def test_expiry_is_inclusive():
    expires = datetime(2024, 6, 1, 12, 0)
    assert evaluate(coupon(expires_at=expires), 1200, expires).error == CouponErrorKind.EXPIRED
    assert evaluate(coupon(expires_at=expires), 1200, datetime(2024, 6, 1, 11, 59)).ok


def test_expiry_compares_aware_and_naive_instants_as_utc():
    expires = datetime(2024, 6, 1, 12, 0)
    now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert evaluate(coupon(expires_at=expires), 1200, now).error == CouponErrorKind.EXPIRED


def test_expired_is_reported_before_usage_limit():
    result = evaluate(coupon(expires_at=datetime(2020, 1, 1), used_count=100), 1200, NOW)
    assert result.error == CouponErrorKind.EXPIRED


def test_usage_boundary():
    assert evaluate(coupon(used_count=99, max_uses=100), 1200, NOW).ok
    result = evaluate(coupon(used_count=100, max_uses=100), 1200, NOW)
    assert result.error == CouponErrorKind.USAGE_LIMIT_REACHED


def test_usage_limit_is_reported_before_minimum():
    result = evaluate(coupon(used_count=100), 10, NOW)
    assert result.error == CouponErrorKind.USAGE_LIMIT_REACHED


def test_below_minimum_carries_shortfall():
    result = evaluate(coupon(min_order_amount=999), 800, NOW)

    assert result.error == CouponErrorKind.BELOW_MINIMUM
    assert result.shortfall == 199
    assert result.message == "Add ₹199 more to use this coupon"


def test_cart_total_equal_to_minimum_qualifies():
    assert evaluate(coupon(min_order_amount=999), 999, NOW).ok


def test_fixed_discount_is_clamped_to_cart_total():
    fixed = coupon(discount_type=DiscountType.FIXED, discount_value=500, min_order_amount=0)
    assert evaluate(fixed, 1200, NOW).applied.discount_amount == 500
    assert evaluate(fixed, 300, NOW).applied.discount_amount == 300


def test_full_percentage_never_exceeds_cart_total():
    result = evaluate(coupon(discount_value=100, min_order_amount=0), 349, NOW)
    assert result.applied.discount_amount == 349


@pytest.mark.parametrize(
    "cart_total, percent, expected",
    [
        (1200, 10, 120),
        (1005, 10, 101),  # 100.5 rounds up
        (1004, 10, 100),
        (999, 15, 150),   # 149.85
        (0, 50, 0),
    ],
)
def test_percentage_discount_rounds_half_up(cart_total, percent, expected):
    assert compute_discount(DiscountType.PERCENTAGE, percent, cart_total) == expected


def test_evaluate_is_deterministic():
    first = evaluate(coupon(), 1500, NOW)
    second = evaluate(coupon(), 1500, NOW)
    assert first == second


def test_recompute_uses_original_terms_without_revalidating():
    applied = AppliedCoupon(
        code="SAVE10",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=10,
        discount_amount=120,
    )

    # Below the original minimum order: still applied, just smaller
    smaller = recompute(applied, 500)
    assert smaller.discount_amount == 50
    assert smaller.code == "SAVE10"
    assert applied.discount_amount == 120


def test_recompute_fixed_clamps_to_new_total():
    applied = AppliedCoupon(
        code="FLAT150",
        discount_type=DiscountType.FIXED,
        discount_value=150,
        discount_amount=150,
    )
    assert recompute(applied, 100).discount_amount == 100
    assert recompute(applied, 2000).discount_amount == 150
