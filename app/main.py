from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.logging import get_logger
from app.db.session import create_db_and_tables
from app.services.coupon import CouponStoreError

# Import models to ensure they are registered with SQLModel metadata
from app.models.coupon import Coupon
from app.models.product import Product
from app.models.storage import StoredValue

logger = get_logger("api")

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("%s started", settings.PROJECT_NAME)
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
    description="Pricing, coupon and product image API for the PrintDukan storefront"
)

@app.exception_handler(CouponStoreError)
async def coupon_store_error_handler(request: Request, exc: CouponStoreError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})

@app.get("/")
def read_root():
    return {"message": "Welcome to PrintDukan API. Visit /docs for Swagger UI."}

from app.routers import admin, cart, coupons, favorites, payment, products

app.include_router(products.router, prefix="/api/v1/products", tags=["products"])
app.include_router(coupons.router, prefix="/api/v1/coupons", tags=["coupons"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["cart"])
app.include_router(favorites.router, prefix="/api/v1/favorites", tags=["favorites"])
app.include_router(payment.router, prefix="/api/v1/payment", tags=["payment"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])

# Add CORS
from fastapi.middleware.cors import CORSMiddleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Allow all for demo
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
