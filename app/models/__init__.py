# Import all models to register them with SQLModel
from app.models.coupon import Coupon, DiscountType
from app.models.product import Product, PricedOption
from app.models.storage import StoredValue

__all__ = [
    "Coupon",
    "DiscountType",
    "Product",
    "PricedOption",
    "StoredValue",
]
