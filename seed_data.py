from datetime import datetime, timedelta, timezone
from sqlmodel import Session, select
from app.db.session import engine, create_db_and_tables
from app.models.coupon import Coupon, DiscountType
from app.models.product import Product

def seed_catalog():
    print("Creating database and tables...")
    create_db_and_tables()

    with Session(engine) as session:
        # Check if products already exist to avoid duplicates
        existing_products = session.exec(select(Product)).all()
        if existing_products:
            print(f"Database already contains {len(existing_products)} products. Skipping seed.")
            return

        print("Seeding initial products and coupons...")
        products = [
            Product(
                name="Custom Printed T-Shirt",
                slug="custom-tshirt",
                category="t-shirts",
                description="Soft cotton tee printed with your own photo or text.",
                base_price=499,
                images=["/images/tshirt-white.webp"],
                sizes=[{"name": "S", "price": 0}, {"name": "M", "price": 0}, {"name": "L", "price": 50}, {"name": "XL", "price": 80}],
                variants=[{"name": "White", "price": 0, "hex": "#ffffff"}, {"name": "Black", "price": 30, "hex": "#000000"}],
                variant_images={
                    "color:Black": ["/images/tshirt-black.webp"],
                    "color:Black,size:XL": ["/images/tshirt-black-xl.webp"],
                    "default": ["/images/tshirt-white.webp"],
                },
                is_customizable=True,
                is_featured=True,
            ),
            Product(
                name="Framed Acrylic Photo",
                slug="framed-acrylic",
                category="acrylic",
                description="Glossy acrylic print with a wooden frame.",
                base_price=899,
                images=["/images/acrylic.webp"],
                sizes=[{"name": "8x10", "price": 0}, {"name": "12x16", "price": 400}],
                variants=[{"name": "Walnut", "price": 0}, {"name": "Black", "price": 100}],
                variant_images={"frame:Walnut": ["/images/acrylic-walnut.webp"]},
                is_customizable=True,
            ),
            Product(
                name="Acrylic Name Plate",
                slug="acrylic-name-plate",
                category="acrylic",
                description="Personalised acrylic name plate for home or office.",
                base_price=699,
                images=["/images/name-plate.webp"],
            ),
        ]
        coupons = [
            Coupon(code="SAVE10", discount_type=DiscountType.PERCENTAGE, discount_value=10,
                   min_order_amount=999, max_uses=100, expires_at=datetime.now(timezone.utc) + timedelta(days=90)),
            Coupon(code="FLAT150", discount_type=DiscountType.FIXED, discount_value=150,
                   min_order_amount=1499, max_uses=50, expires_at=datetime.now(timezone.utc) + timedelta(days=30)),
        ]

        for item in products + coupons:
            session.add(item)

        session.commit()
        print(f"Successfully seeded {len(products)} products and {len(coupons)} coupons!")

if __name__ == "__main__":
    seed_catalog()
