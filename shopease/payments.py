"""
M-Pesa checkout flows.

Two flows post to the same endpoint:
  * the payment form: free amount + phone, bearer token, status-specific errors
  * the product checkout: fixed product price + Safaricom number, checkout id
Outcomes are plain dicts the callbacks turn into banners. Nothing is retried;
the user re-submits.
"""
import time

from shopease import api, config
from shopease.validation import (
    normalize_phone,
    parse_amount,
    validate_checkout,
    validate_payment_form,
)

PAYMENT_SUCCESS = "Payment initiated successfully. Please check your phone to complete the transaction."
PAYMENT_FAILED = "Payment failed. Please try again."
CHECKOUT_SUCCESS = "Payment initiated successfully. Please check your phone to complete the payment."
CHECKOUT_FAILED = "Payment initiation failed. Please try again."
NETWORK_ERROR = "Network error. Please check your connection."

STATUS_MESSAGES = {
    401: "Session expired. Please login again.",
    429: "Too many attempts. Please try again later.",
    500: "Server error. Please try again later.",
}


def _outcome(success, message, errors=None, **extra):
    outcome = {
        "success": success,
        "message": message,
        "variant": "success" if success else "danger",
        "errors": errors or {},
    }
    outcome.update(extra)
    return outcome


def payment_error_message(result):
    status = result.get("status")
    if status is None:
        return NETWORK_ERROR
    server_error = (result.get("data") or {}).get("error")
    if status == 400:
        return server_error or "Invalid request"
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    return server_error or PAYMENT_FAILED


def _wire_amount(value):
    return int(value) if float(value).is_integer() else value


def submit_payment(amount, phone, token=None):
    """
    Validate the payment form and ask the API for an STK push.
    On success the caller clears the form; on validation failure nothing is sent.
    """
    errors = validate_payment_form(amount, phone)
    if errors:
        return _outcome(False, "", errors)

    result = api.initiate_payment(_wire_amount(parse_amount(amount)), normalize_phone(phone), token=token)
    if not result["success"]:
        return _outcome(False, payment_error_message(result))
    return _outcome(True, result["data"].get("message") or PAYMENT_SUCCESS)


def checkout_request_id(now=None):
    """TTOK followed by the epoch time in milliseconds."""
    if now is None:
        now = time.time()
    return f"{config.CHECKOUT_PREFIX}{int(now * 1000)}"


def checkout_amount(product):
    """The amount shown and charged for a product, two decimals."""
    if not product:
        return "0.00"
    price = parse_amount(product.get("price"))
    return f"{price or 0:.2f}"


def prepare_checkout(product, phone):
    """Check the checkout form before the confirmation dialog opens."""
    error = validate_checkout(phone, product, checkout_amount(product))
    if error:
        return _outcome(False, error)
    return _outcome(True, "")


def confirm_checkout(product, phone, request_id=None, token=None):
    result = api.initiate_checkout(
        phone_number=str(phone).strip(),
        amount=checkout_amount(product),
        product_name=product.get("name", ""),
        checkout_request_id=request_id or checkout_request_id(),
        token=token,
    )
    if not result["success"]:
        message = (result.get("data") or {}).get("error") or CHECKOUT_FAILED
        return _outcome(False, message, checkout_id="")
    return _outcome(True, CHECKOUT_SUCCESS, checkout_id=result["data"].get("checkout_id", ""))


def progress_for_tick(n_intervals):
    """Simulated progress: PROGRESS_STEP percent per tick, capped at 100."""
    return min(100, max(0, int(n_intervals or 0)) * config.PROGRESS_STEP)
