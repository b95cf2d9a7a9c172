from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "PrintDukan API"
    DATABASE_URL: str = "sqlite:///./printdukan.db"
    LOG_LEVEL: str = "INFO"

    # Admin API guard
    ADMIN_API_KEY: str = "change_me_admin_key"

    # Razorpay (signature verification only)
    RAZORPAY_KEY_ID: str = "rzp_test_placeholder"
    RAZORPAY_KEY_SECRET: str = "rzp_secret_placeholder"

    # Coupons
    COUPON_ATOMIC_REDEMPTION: bool = True

    # Cart / favorites storage: "database" or "memory"
    CART_STORAGE_BACKEND: str = "database"

    # Checkout
    ONLINE_PAYMENT_DISCOUNT_PERCENT: int = 10
    COD_ADVANCE_AMOUNT: int = 199
    SHIPPING_COST: int = 0

    # Display markup ("was" price) per surface
    DETAIL_MARKUP_FACTOR: float = 1.2
    RELATED_MARKUP_FACTOR: float = 1.25
    PREVIEW_MARKUP_FACTOR: float = 1.4
    RELATED_PRODUCTS_LIMIT: int = 4

    # Media
    MEDIA_BASE_URL: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
