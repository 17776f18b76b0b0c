"""Client-side form validation.

Validators return a dict of field -> message (empty when the form is fine) so
callbacks can render each message next to its field.
"""
import re

from shopease import config

KENYAN_PHONE_RE = re.compile(r"^(\+?254|0)[17]\d{8}$")
SAFARICOM_PHONE_RE = re.compile(r"^0[17]\d{8}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_PASSWORD_LENGTH = 6


def _clean(value):
    return "" if value is None else str(value).strip()


def is_valid_phone(number):
    return bool(KENYAN_PHONE_RE.match(_clean(number)))


def is_valid_safaricom_number(number):
    return bool(SAFARICOM_PHONE_RE.match(_clean(number)))


def normalize_phone(number):
    """
    Convert a Kenyan number to the 2547XXXXXXXX form the payment API expects.
    0712345678 -> 254712345678, +254712345678 -> 254712345678.
    """
    phone = _clean(number)
    if phone.startswith("0"):
        return "254" + phone[1:]
    if phone.startswith("+254"):
        return phone[1:]
    return phone


def parse_amount(amount):
    """Return the amount as a float, or None when it is not a number."""
    if isinstance(amount, bool):
        return None
    try:
        value = float(_clean(amount))
    except ValueError:
        return None
    if value != value:  # NaN
        return None
    return value


def validate_payment_form(amount, phone):
    errors = {}

    if _clean(amount) == "":
        errors["amount"] = "Amount is required"
    else:
        value = parse_amount(amount)
        if value is None:
            errors["amount"] = "Amount must be a number"
        elif value < config.MIN_AMOUNT:
            errors["amount"] = f"Minimum amount is KSh {config.MIN_AMOUNT}"

    if _clean(phone) == "":
        errors["phone"] = "Phone number is required"
    elif not is_valid_phone(phone):
        errors["phone"] = "Please enter a valid Kenyan phone number"

    return errors


def validate_checkout(phone, product, amount):
    """Checks for the product checkout page; returns the first problem or None."""
    if not is_valid_safaricom_number(phone):
        return "Please enter a valid Safaricom phone number (format: 07XXXXXXXX or 01XXXXXXXX)"
    value = parse_amount(amount)
    if not product or value is None or value <= 0:
        return "Invalid product or amount"
    return None


def validate_registration(username, email, password, phone):
    errors = {}
    if not _clean(username):
        errors["username"] = "Username is required"
    if not _clean(email):
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(_clean(email)):
        errors["email"] = "Please enter a valid email address"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if not _clean(phone):
        errors["phone"] = "Phone number is required"
    elif not is_valid_phone(phone):
        errors["phone"] = "Please enter a valid Kenyan phone number"
    return errors


def validate_login(username, password):
    errors = {}
    if not _clean(username):
        errors["username"] = "Username is required"
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_product(name, description, cost, filename):
    errors = {}
    if not _clean(name):
        errors["name"] = "Product name is required"
    if not _clean(description):
        errors["description"] = "Description is required"
    value = parse_amount(cost)
    if value is None or value <= 0:
        errors["cost"] = "Cost must be a positive number"
    if not filename:
        errors["photo"] = "Please choose a product photo"
    return errors
