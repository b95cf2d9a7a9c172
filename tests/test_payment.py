import hashlib
import hmac

from app.services.coupon import CouponService
from app.services.payment import PaymentService, PaymentVerification, verify_payment_signature
from app.services.storage import MemoryStorage


def sign(order_id, payment_id, secret="test_secret"):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def test_verify_signature():
    signature = sign("order_1", "pay_1")
    assert verify_payment_signature("order_1", "pay_1", signature)
    assert not verify_payment_signature("order_1", "pay_2", signature)
    assert not verify_payment_signature("order_1", "pay_1", "")


def test_signature_from_another_key_is_rejected():
    assert not verify_payment_signature("order_1", "pay_1", sign("order_1", "pay_1", secret="other_secret"))


def test_verified_checkout_redeems_coupon_once(session, make_coupon):
    coupon = make_coupon(used_count=0)
    service = PaymentService(CouponService(session), MemoryStorage())
    data = PaymentVerification(
        razorpay_order_id="order_1",
        razorpay_payment_id="pay_1",
        razorpay_signature=sign("order_1", "pay_1"),
        coupon_code="save10",
    )

    first = service.verify_checkout(data)
    second = service.verify_checkout(data)

    assert first.verified and first.coupon_redeemed
    assert second.verified and not second.coupon_redeemed
    session.refresh(coupon)
    assert coupon.used_count == 1


def test_bad_signature_does_not_redeem(session, make_coupon):
    coupon = make_coupon(used_count=0)
    service = PaymentService(CouponService(session), MemoryStorage())

    result = service.verify_checkout(PaymentVerification(
        razorpay_order_id="order_1",
        razorpay_payment_id="pay_1",
        razorpay_signature="forged",
        coupon_code="SAVE10",
    ))

    assert not result.verified
    session.refresh(coupon)
    assert coupon.used_count == 0
