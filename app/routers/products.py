from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlmodel import Session, select
from app.core.config import settings
from app.db.session import get_session
from app.models.product import Product, media_url
from app.services.pricing import DisplayPrice, compute_display_price, default_option, option_delta
from app.services.variant_images import generate_key, parse_variant_images, resolve

router = APIRouter()

MARKUP_FACTORS = {
    "detail": settings.DETAIL_MARKUP_FACTOR,
    "related": settings.RELATED_MARKUP_FACTOR,
    "preview": settings.PREVIEW_MARKUP_FACTOR,
}

# Query parameters that are not variant axes
RESERVED_PARAMS = {"surface"}

class ResolvedImages(BaseModel):
    key: str
    images: List[str]

class ProductPrice(BaseModel):
    size: Optional[str]
    variant: Optional[str]
    price: DisplayPrice

class RelatedProduct(BaseModel):
    id: int
    name: str
    slug: str
    image: Optional[str]
    price: float
    original_price: int
    discount_percent: int

def get_active_product(slug: str, session: Session = Depends(get_session)) -> Product:
    product = session.exec(select(Product).where(Product.slug == slug)).first()
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

@router.get("/", response_model=List[Product])
def read_products(
    q: Optional[str] = None,
    category: Optional[str] = None,
    session: Session = Depends(get_session)
):
    query = select(Product).where(Product.is_active == True)  # noqa: E712
    if q:
        query = query.where(Product.name.ilike(f"%{q}%"))
    if category:
        query = query.where(Product.category == category)
    return session.exec(query).all()

@router.get("/{slug}", response_model=Product)
def read_product(product: Product = Depends(get_active_product)):
    return product

@router.get("/{slug}/images", response_model=ResolvedImages)
def product_images(request: Request, product: Product = Depends(get_active_product)):
    """Images for the selected options, passed as query parameters (?size=L&color=Red)"""
    selection: Dict[str, str] = {
        axis: value
        for axis, value in request.query_params.items()
        if axis not in RESERVED_PARAMS
    }
    images = resolve(parse_variant_images(product.variant_images), product.images, selection)
    return ResolvedImages(key=generate_key(selection), images=[media_url(url) for url in images])

@router.get("/{slug}/price", response_model=ProductPrice)
def product_price(
    size: Optional[str] = None,
    variant: Optional[str] = None,
    surface: str = Query("detail", pattern="^(detail|related|preview)$"),
    product: Product = Depends(get_active_product)
):
    """Final price and strike-through price for a size/variant choice"""
    sizes = product.size_options()
    variants = product.variant_options()
    # The preview starts on the first option of each kind, like the storefront does
    if surface == "preview":
        size = size or default_option(sizes)
        variant = variant or default_option(variants)

    price = compute_display_price(
        product.base_price,
        option_delta(sizes, size),
        option_delta(variants, variant),
        MARKUP_FACTORS[surface],
    )
    return ProductPrice(size=size, variant=variant, price=price)

@router.get("/{slug}/related", response_model=List[RelatedProduct])
def related_products(product: Product = Depends(get_active_product), session: Session = Depends(get_session)):
    related = session.exec(
        select(Product)
        .where(Product.category == product.category)
        .where(Product.id != product.id)
        .where(Product.is_active == True)  # noqa: E712
        .limit(settings.RELATED_PRODUCTS_LIMIT)
    ).all()

    cards = []
    for item in related:
        price = compute_display_price(item.base_price, markup_factor=settings.RELATED_MARKUP_FACTOR)
        cards.append(RelatedProduct(
            id=item.id,
            name=item.name,
            slug=item.slug,
            image=item.image_url,
            price=price.final_price,
            original_price=price.original_price,
            discount_percent=price.discount_percent,
        ))
    return cards
