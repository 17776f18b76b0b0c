import os

# ----------------------------
# Remote API
# ----------------------------
API_BASE_URL = os.environ.get("SHOPEASE_API_URL", "https://ttok.pythonanywhere.com").rstrip("/")

PAYMENT_PATH = "/api/mpesa_payment"
PRODUCTS_PATH = "/api/get_product_details"
SIGNIN_PATH = "/api/signin"
SIGNUP_PATH = "/api/signup"
ADD_PRODUCT_PATH = "/api/add_product"

PRODUCT_IMAGE_URL = os.environ.get("SHOPEASE_IMAGE_URL", API_BASE_URL + "/static/images/")

# seconds; the only cancellation the client has
REQUEST_TIMEOUT = float(os.environ.get("SHOPEASE_TIMEOUT", "15"))

# ----------------------------
# Checkout
# ----------------------------
MIN_AMOUNT = 10  # KSh
CHECKOUT_PREFIX = "TTOK"
CURRENCY = "Ksh"

PROGRESS_TICK_MS = 300
PROGRESS_STEP = 10

# ----------------------------
# UI
# ----------------------------
BRAND = "ShopEase"
CAROUSEL_INTERVAL_MS = 5000

# ----------------------------
# Server
# ----------------------------
LOG_LEVEL = os.environ.get("SHOPEASE_LOG_LEVEL", "INFO").upper()
HOST = os.environ.get("SHOPEASE_HOST", "0.0.0.0")
PORT = int(os.environ.get("SHOPEASE_PORT", "8080"))
DEBUG = os.environ.get("SHOPEASE_DEBUG", "").lower() in ("1", "true", "yes")
