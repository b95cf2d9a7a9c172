from typing import Dict, List, Optional
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import desc, func
from sqlmodel import Session, select
from app.core.config import settings
from app.core.logging import get_logger
from app.db.session import get_session
from app.models.coupon import Coupon, DiscountType
from app.models.product import PricedOption, Product
from app.services.coupon import normalize_code, to_utc
from app.services.variant_images import generate_key, parse_variant_images, set_variant_images

logger = get_logger("admin")

def require_admin(x_admin_key: Optional[str] = Header(None)):
    """Admin routes are guarded by a shared key"""
    if not x_admin_key or x_admin_key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Admin access required")

router = APIRouter(dependencies=[Depends(require_admin)])

# Pydantic models for requests
class CouponCreate(BaseModel):
    code: str = Field(min_length=1)
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: float = Field(ge=0)
    min_order_amount: float = Field(default=0, ge=0)
    max_uses: int = Field(default=100, ge=1)
    expires_at: datetime
    is_active: bool = True

    @model_validator(mode="after")
    def check_percentage(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("Percentage discount cannot exceed 100")
        return self

class CouponUpdate(BaseModel):
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = Field(default=None, ge=0)
    min_order_amount: Optional[float] = Field(default=None, ge=0)
    max_uses: Optional[int] = Field(default=None, ge=1)
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None

class ProductCreate(BaseModel):
    name: str
    slug: Optional[str] = None
    category: str
    description: Optional[str] = None
    base_price: float = Field(ge=0)
    images: List[str] = []
    sizes: List[PricedOption] = []
    variants: List[PricedOption] = []
    is_customizable: bool = False
    is_featured: bool = False

class VariantImagesUpdate(BaseModel):
    selection: Dict[str, Optional[str]] = {}
    images: List[str] = []

def get_coupon_or_404(coupon_id: int, session: Session) -> Coupon:
    coupon = session.get(Coupon, coupon_id)
    if not coupon:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return coupon

@router.get("/coupons", response_model=List[Coupon])
def get_coupons(search: Optional[str] = None, session: Session = Depends(get_session)):
    """All coupons, newest first, optionally filtered by code"""
    query = select(Coupon)
    if search:
        query = query.where(func.upper(Coupon.code).contains(normalize_code(search)))
    return session.exec(query.order_by(desc(Coupon.created_at))).all()

@router.post("/coupons", response_model=Coupon)
def create_coupon(data: CouponCreate, session: Session = Depends(get_session)):
    code = normalize_code(data.code)
    existing = session.exec(select(Coupon).where(func.upper(Coupon.code) == code)).first()
    if existing:
        raise HTTPException(status_code=400, detail=f"Coupon {code} already exists")

    coupon = Coupon(
        **data.model_dump(exclude={"code", "expires_at"}),
        code=code,
        expires_at=to_utc(data.expires_at),
    )
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    logger.info("Coupon %s created", code)
    return coupon

@router.put("/coupons/{coupon_id}", response_model=Coupon)
def update_coupon(coupon_id: int, data: CouponUpdate, session: Session = Depends(get_session)):
    coupon = get_coupon_or_404(coupon_id, session)

    updates = data.model_dump(exclude_unset=True)
    if "expires_at" in updates and updates["expires_at"] is not None:
        updates["expires_at"] = to_utc(updates["expires_at"])
    for field, value in updates.items():
        if value is not None:
            setattr(coupon, field, value)

    if coupon.discount_type == DiscountType.PERCENTAGE and coupon.discount_value > 100:
        raise HTTPException(status_code=400, detail="Percentage discount cannot exceed 100")

    coupon.updated_at = datetime.now(timezone.utc)
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon

@router.delete("/coupons/{coupon_id}")
def delete_coupon(coupon_id: int, session: Session = Depends(get_session)):
    coupon = get_coupon_or_404(coupon_id, session)
    session.delete(coupon)
    session.commit()
    logger.info("Coupon %s deleted", coupon.code)
    return {"message": "Coupon deleted successfully"}

@router.post("/products", response_model=Product)
def create_product(data: ProductCreate, session: Session = Depends(get_session)):
    # Generate slug if not provided
    slug = data.slug or data.name.lower().replace(" ", "-")
    if session.exec(select(Product).where(Product.slug == slug)).first():
        raise HTTPException(status_code=400, detail=f"Product slug {slug} already exists")

    product = Product(
        **data.model_dump(exclude={"slug", "sizes", "variants"}),
        slug=slug,
        sizes=[option.model_dump() for option in data.sizes],
        variants=[option.model_dump() for option in data.variants],
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product

@router.put("/products/{product_id}/variant-images")
def update_variant_images(
    product_id: int,
    data: VariantImagesUpdate,
    session: Session = Depends(get_session)
):
    """Store images for an option selection under its generated key; an empty list clears it"""
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    product.variant_images = set_variant_images(
        parse_variant_images(product.variant_images), data.selection, data.images
    )
    product.updated_at = datetime.now(timezone.utc)
    session.add(product)
    session.commit()
    session.refresh(product)
    return {"key": generate_key(data.selection), "variant_images": product.variant_images}
