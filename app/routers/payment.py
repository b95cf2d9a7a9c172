from fastapi import APIRouter, Depends, HTTPException
from app.routers.coupons import get_coupon_service
from app.services.coupon import CouponService
from app.services.payment import PaymentService, PaymentVerification, PaymentVerificationResult
from app.services.storage import KeyValueStorage, get_storage

router = APIRouter()

def get_payment_service(
    coupons: CouponService = Depends(get_coupon_service),
    storage: KeyValueStorage = Depends(get_storage)
) -> PaymentService:
    return PaymentService(coupons, storage)

@router.post("/verify", response_model=PaymentVerificationResult)
def verify_payment(data: PaymentVerification, service: PaymentService = Depends(get_payment_service)):
    """Verify the checkout signature and record the coupon used for the order"""
    result = service.verify_checkout(data)
    if not result.verified:
        raise HTTPException(status_code=400, detail="Invalid payment signature")
    return result
