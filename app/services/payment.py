import razorpay
from typing import Optional
from pydantic import BaseModel
from razorpay.errors import SignatureVerificationError
from app.core.config import settings
from app.core.logging import get_logger
from app.services.coupon import CouponService, normalize_code
from app.services.storage import KeyValueStorage

logger = get_logger("payment")

REDEMPTION_STORAGE_KEY = "printdukan_redeemed"

client = razorpay.Client(auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET))


class PaymentVerification(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str
    coupon_code: Optional[str] = None


class PaymentVerificationResult(BaseModel):
    verified: bool
    payment_id: str
    order_id: str
    coupon_redeemed: bool = False


def verify_payment_signature(order_id: str, payment_id: str, signature: str) -> bool:
    """Check the checkout signature Razorpay hands back for "<order_id>|<payment_id>"."""
    try:
        return bool(client.utility.verify_payment_signature({
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature or "",
        }))
    except SignatureVerificationError:
        return False


class PaymentService:
    def __init__(self, coupons: CouponService, storage: KeyValueStorage):
        self.coupons = coupons
        self.storage = storage

    def verify_checkout(self, data: PaymentVerification) -> PaymentVerificationResult:
        """Verify a completed payment and record the coupon it used, once per payment id."""
        verified = verify_payment_signature(
            data.razorpay_order_id, data.razorpay_payment_id, data.razorpay_signature
        )
        result = PaymentVerificationResult(
            verified=verified,
            payment_id=data.razorpay_payment_id,
            order_id=data.razorpay_order_id,
        )
        if not verified:
            logger.warning("Invalid payment signature for order %s", data.razorpay_order_id)
            return result

        code = normalize_code(data.coupon_code)
        if not code:
            return result

        marker = f"{REDEMPTION_STORAGE_KEY}:{data.razorpay_payment_id}"
        if self.storage.get(marker):
            logger.info("Payment %s already redeemed coupon %s", data.razorpay_payment_id, code)
            return result

        result.coupon_redeemed = self.coupons.redeem(code)
        self.storage.set(marker, {"code": code})
        return result
