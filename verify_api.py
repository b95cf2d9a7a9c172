import requests
import json

BASE_URL = "http://localhost:8000/api/v1"
CART_OWNER = "verify-guest"

def print_response(name, response):
    print(f"--- {name} ---")
    print(f"Status: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)
    print("\n")

def run_verification():
    # Assumes seed_data.py has been run against the server's database
    print("1. Resolving variant images...")
    resp = requests.get(f"{BASE_URL}/products/custom-tshirt/images", params={"size": "XL", "color": "Black"})
    print_response("Variant Images", resp)

    print("2. Pricing a selection...")
    resp = requests.get(f"{BASE_URL}/products/custom-tshirt/price", params={"size": "L", "variant": "Black"})
    print_response("Display Price", resp)

    print("3. Listing available coupons...")
    resp = requests.get(f"{BASE_URL}/coupons/available", params={"cart_total": 1200})
    print_response("Available Coupons", resp)

    print("4. Filling cart and applying coupon...")
    requests.delete(f"{BASE_URL}/cart/{CART_OWNER}")
    resp = requests.post(f"{BASE_URL}/cart/{CART_OWNER}/items", json={
        "product_id": "1",
        "product_name": "Custom Printed T-Shirt",
        "selected_size": "L",
        "quantity": 2,
        "unit_price": 549
    })
    print_response("Add To Cart", resp)
    resp = requests.post(f"{BASE_URL}/cart/{CART_OWNER}/coupon", json={"code": "save10"})
    print_response("Apply Coupon", resp)

    print("5. Checkout summary (online and COD)...")
    for method in ("razorpay", "cod"):
        resp = requests.get(f"{BASE_URL}/cart/{CART_OWNER}/summary", params={"payment_method": method})
        print_response(f"Summary ({method})", resp)

    # Verification with a forged signature must fail
    print("6. Verifying payment (expected failure)...")
    resp = requests.post(f"{BASE_URL}/payment/verify", json={
        "razorpay_order_id": "order_test",
        "razorpay_payment_id": "pay_test",
        "razorpay_signature": "invalid_signature"
    })
    print_response("Payment Verify (Invalid)", resp)

if __name__ == "__main__":
    run_verification()
