"""Storefront-wide constants.

Centralizes the pricing rule and validation limits so every surface that
shows a total computes it from the same numbers.
"""
from decimal import Decimal

# ============== PRICING ==============
CURRENCY = "INR"
TAX_RATE = Decimal("0.18")
FREE_SHIPPING_THRESHOLD = Decimal("499")
FLAT_SHIPPING_FEE = Decimal("49")

# ============== SERVER CART ==============
MIN_CART_QUANTITY = 1
MAX_CART_QUANTITY = 99

# ============== LOCAL STORAGE KEYS ==============
CART_STORAGE_KEY = "verdantCart"
SESSION_STORAGE_KEY = "sessionId"

# ============== CHECKOUT ==============
DEFAULT_COUNTRY = "India"
SHOP_REDIRECT_PATH = "/plants"
ORDER_NUMBER_PREFIX = "VC"
WAREHOUSE_LOCATION = "City Roots Warehouse"

INDIAN_STATES = (
    "Andhra Pradesh",
    "Arunachal Pradesh",
    "Assam",
    "Bihar",
    "Chhattisgarh",
    "Goa",
    "Gujarat",
    "Haryana",
    "Himachal Pradesh",
    "Jharkhand",
    "Karnataka",
    "Kerala",
    "Madhya Pradesh",
    "Maharashtra",
    "Manipur",
    "Meghalaya",
    "Mizoram",
    "Nagaland",
    "Odisha",
    "Punjab",
    "Rajasthan",
    "Sikkim",
    "Tamil Nadu",
    "Telangana",
    "Tripura",
    "Uttar Pradesh",
    "Uttarakhand",
    "West Bengal",
    "Delhi",
    "Jammu and Kashmir",
    "Ladakh",
)

# ============== OTP ==============
DEMO_OTP_CODE = "123456"
