from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlmodel import Session
from app.db.session import get_session
from app.services.coupon import (
    AppliedCoupon,
    AvailableCoupon,
    CouponResult,
    CouponService,
    recompute,
)

router = APIRouter()

class CouponApply(BaseModel):
    code: str
    cart_total: float = Field(ge=0)

class CouponRecompute(BaseModel):
    applied: AppliedCoupon
    cart_total: float = Field(ge=0)

def get_coupon_service(session: Session = Depends(get_session)) -> CouponService:
    return CouponService(session)

def raise_for_result(result: CouponResult) -> AppliedCoupon:
    """Turn a rejected coupon into a 400 carrying its error kind."""
    if not result.ok:
        raise HTTPException(
            status_code=400,
            detail={
                "kind": result.error.value,
                "message": result.message,
                "shortfall": result.shortfall,
            },
        )
    return result.applied

@router.post("/apply", response_model=AppliedCoupon)
def apply_coupon(data: CouponApply, service: CouponService = Depends(get_coupon_service)):
    """Validate a coupon code against a cart total"""
    return raise_for_result(service.apply(data.code, data.cart_total))

@router.post("/recompute", response_model=AppliedCoupon)
def recompute_coupon(data: CouponRecompute):
    """Re-derive an applied coupon's discount after the cart total changed"""
    return recompute(data.applied, data.cart_total)

@router.get("/available", response_model=List[AvailableCoupon])
def available_coupons(
    cart_total: float = Query(0, ge=0),
    service: CouponService = Depends(get_coupon_service)
):
    """Active, unexpired coupons with eligibility for the given cart total"""
    return service.list_available(cart_total)
