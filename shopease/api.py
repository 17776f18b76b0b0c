"""
HTTP client for the remote storefront API.

Every call returns a result dict and never raises:
    {"success": True,  "status": 200,  "data": {...}}
    {"success": False, "status": 401,  "data": {...}, "error": "..."}
    {"success": False, "status": None, "data": {},    "error": "..."}   # no response
"""
import logging

import requests

from shopease import config

logger = logging.getLogger(__name__)


def mask_phone(phone):
    phone = str(phone or "")
    if len(phone) <= 4:
        return "*" * len(phone)
    return "*" * (len(phone) - 4) + phone[-4:]


def _url(path):
    return config.API_BASE_URL + path


def _headers(token=None, json_body=True):
    headers = {}
    if json_body:
        headers["Content-Type"] = "application/json"
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _body(resp):
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {"items": data}


def _result(method, path, resp):
    data = _body(resp)
    if resp.ok:
        return {"success": True, "status": resp.status_code, "data": data}
    error = data.get("error") or data.get("message") or resp.reason or f"HTTP {resp.status_code}"
    logger.warning("%s %s failed with %s: %s", method, path, resp.status_code, error)
    return {"success": False, "status": resp.status_code, "data": data, "error": str(error)}


def _no_response(method, path, exc):
    if isinstance(exc, requests.Timeout):
        error = f"Request timed out after {config.REQUEST_TIMEOUT:g}s"
    else:
        error = str(exc) or exc.__class__.__name__
    logger.warning("%s %s got no response: %s", method, path, error)
    return {"success": False, "status": None, "data": {}, "error": error}


def post_json(path, payload, token=None):
    try:
        resp = requests.post(_url(path), json=payload, headers=_headers(token),
                             timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        return _no_response("POST", path, e)
    return _result("POST", path, resp)


def post_form(path, data, files=None, token=None):
    try:
        resp = requests.post(_url(path), data=data, files=files,
                             headers=_headers(token, json_body=False),
                             timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        return _no_response("POST", path, e)
    return _result("POST", path, resp)


def get_json(path, token=None):
    try:
        resp = requests.get(_url(path), headers=_headers(token, json_body=False),
                            timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        return _no_response("GET", path, e)
    return _result("GET", path, resp)


# ----------------------------
# M-Pesa
# ----------------------------
def initiate_payment(amount, phone, token=None):
    """
    Ask the API to send an STK push for a free-form amount.
    phone must already be normalized to 2547XXXXXXXX.
    """
    logger.info("Initiating M-Pesa payment of %s for %s", amount, mask_phone(phone))
    result = post_json(config.PAYMENT_PATH, {"amount": amount, "phone": phone}, token=token)
    if result["success"]:
        logger.info("Payment request accepted for %s", mask_phone(phone))
    return result


def initiate_checkout(phone_number, amount, product_name, checkout_request_id, token=None):
    """STK push for a catalog product; the API answers with a checkout_id."""
    logger.info("Checkout %s: %s for %s", checkout_request_id, product_name, mask_phone(phone_number))
    payload = {
        "phone_number": phone_number,
        "amount": amount,
        "product_name": product_name,
        "checkout_request_id": checkout_request_id,
    }
    return post_json(config.PAYMENT_PATH, payload, token=token)


# ----------------------------
# Accounts
# ----------------------------
def sign_in(username, password):
    return post_form(config.SIGNIN_PATH, {"username": username, "password": password})


def sign_up(username, email, password, phone):
    return post_form(config.SIGNUP_PATH, {
        "username": username,
        "email": email,
        "password": password,
        "phone": phone,
    })


# ----------------------------
# Products
# ----------------------------
def fetch_products():
    result = get_json(config.PRODUCTS_PATH)
    if result["success"]:
        data = result["data"]
        # the endpoint answers with a bare list; _body wraps it
        result["products"] = data.get("items", data.get("products", []))
    return result


def add_product(name, description, cost, filename, content, token=None):
    """content is the raw photo bytes."""
    data = {
        "product_name": name,
        "product_description": description,
        "product_cost": cost,
    }
    files = {"product_photo": (filename, content)}
    return post_form(config.ADD_PRODUCT_PATH, data, files=files, token=token)
