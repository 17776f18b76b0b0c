import pytest
from dash import no_update
from dash.exceptions import PreventUpdate

from shopease import callbacks, layouts, payments
from shopease.session import empty_session


def component_ids(component):
    """Every id in a Dash component tree."""
    found = []
    stack = [component]
    while stack:
        node = stack.pop()
        if isinstance(node, (list, tuple)):
            stack.extend(node)
            continue
        if not hasattr(node, "to_plotly_json"):
            continue
        node_id = getattr(node, "id", None)
        if node_id is not None:
            found.append(node_id)
        stack.append(getattr(node, "children", None))
    return found


def text_of(component):
    parts = []
    stack = [component]
    while stack:
        node = stack.pop()
        if isinstance(node, str):
            parts.append(node)
        elif isinstance(node, (list, tuple)):
            stack.extend(reversed(node))
        elif hasattr(node, "to_plotly_json"):
            stack.append(getattr(node, "children", None))
    return " ".join(parts)


# ----------------------------
# Routing
# ----------------------------
@pytest.mark.parametrize(("path", "marker"), [
    ("/", "product-grid"),
    ("/Login", "login-btn"),
    ("/login", "login-btn"),
    ("/Register", "register-btn"),
    ("/AddProduct", "add-product-btn"),
    ("/MpesaPayment", "pay-submit"),
    ("/mpesapayment/", "pay-submit"),
])
def test_routes(path, marker):
    assert marker in component_ids(callbacks.display_page(path, None))


def test_checkout_route_with_and_without_product(product):
    assert "checkout-submit" in component_ids(callbacks.display_page("/checkout", product))
    empty = callbacks.display_page("/checkout", None)
    assert "checkout-submit" not in component_ids(empty)
    assert "No product selected" in text_of(empty)


def test_unknown_route():
    assert "Page not found" in text_of(callbacks.display_page("/nowhere", None))


# ----------------------------
# Navbar / session
# ----------------------------
def test_navbar_for_guest_and_user(session):
    assert "nav-guest" in component_ids(callbacks.render_navbar(empty_session()))
    user_nav = callbacks.render_navbar(session)
    ids = component_ids(user_nav)
    assert "logout-btn" in ids
    assert "Jane" in text_of(user_nav)
    assert "jane@example.com" in text_of(user_nav)


def test_logout_clears_session():
    assert callbacks.logout(1) == (empty_session(), "/")
    with pytest.raises(PreventUpdate):
        callbacks.logout(0)


# ----------------------------
# Carousel
# ----------------------------
def test_carousel_actions():
    state = {"index": 0, "auto_rotate": True, "fade": True}
    assert callbacks.carousel_action("carousel-next", state)["index"] == 1
    assert callbacks.carousel_action("carousel-prev", state)["index"] == 3
    assert callbacks.carousel_action({"type": "carousel-indicator", "index": 2}, state)["index"] == 2
    assert callbacks.carousel_action("carousel-rotate", state)["auto_rotate"] is False
    with pytest.raises(PreventUpdate):
        callbacks.carousel_action(None, state)


def test_render_carousel_pauses_interval():
    slide, indicators, rotate_label, _fade_label, disabled = callbacks.render_carousel(
        {"index": 1, "auto_rotate": False, "fade": False})
    assert "Black Edition" in text_of(slide)
    assert indicators[1]["backgroundColor"] != indicators[0]["backgroundColor"]
    assert rotate_label == "▶"
    assert disabled is True


# ----------------------------
# Products
# ----------------------------
def test_load_products(http):
    http.reply(200, [{"product_id": 1, "product_name": "Shoe", "product_cost": 900}])
    store = callbacks.load_products("/")
    assert store["error"] == ""
    assert store["items"][0]["name"] == "Shoe"

    with pytest.raises(PreventUpdate):
        callbacks.load_products("/login")


def test_load_products_failure(network_down):
    store = callbacks.load_products("/")
    assert store["items"] == []
    assert store["error"].startswith("Could not load products")


def test_render_products(product):
    cards, status = callbacks.render_products({"items": [product], "error": ""}, "air", "featured")
    assert len(cards) == 1
    assert status == "1 product(s)"
    assert {"type": "buy-product", "index": "7"} in component_ids(cards)

    cards, status = callbacks.render_products({"items": [product], "error": ""}, "sandal", "featured")
    assert cards == []
    assert status == "No products match your search."


def test_choose_product(product):
    assert callbacks.choose_product({"type": "buy-product", "index": "7"}, 1, [product]) == (product, "/checkout")
    with pytest.raises(PreventUpdate):
        callbacks.choose_product({"type": "buy-product", "index": "7"}, 0, [product])


# ----------------------------
# Accounts
# ----------------------------
def test_login_success_starts_session(http):
    http.reply(200, {"message": "Login successful", "user": {"username": "jane"}, "access_token": "abc"})
    _message, new_session, path = callbacks.login(1, " jane ", "secret")
    assert new_session == {"user": {"username": "jane"}, "token": "abc"}
    assert path == "/"
    assert http.last["data"]["username"] == "jane"


def test_login_rejected(http):
    http.reply(200, {"message": "Login failed"})
    message, new_session, path = callbacks.login(1, "jane", "wrong")
    assert "Login failed" in text_of(message)
    assert new_session is no_update
    assert path is no_update


def test_login_validation_skips_request(http):
    message, _, _ = callbacks.login(1, "", "")
    assert "Username is required" in text_of(message)
    assert http.calls == []


def test_register(http):
    http.reply(200, {"success": "Thank you for joining"})
    message = callbacks.register(1, "jane", "jane@example.com", "0712345678", "secret1")
    assert "Thank you for joining" in text_of(message)


def test_add_product_requires_login(http):
    message = callbacks.add_product(1, "Shoe", "Nice", 1000, "data:image/png;base64,iVBO", "s.png", None)
    assert "Please login" in text_of(message)
    assert http.calls == []


def test_add_product_uploads(http, session):
    http.reply(200, {"success": "Product added"})
    message = callbacks.add_product(1, "Shoe", "Nice", 1000, "data:image/png;base64,aGVsbG8=", "s.png", session)
    assert "Product added" in text_of(message)
    assert http.last["files"]["product_photo"] == ("s.png", b"hello")


# ----------------------------
# Payment form
# ----------------------------
def test_payment_success_clears_form(http, session):
    http.reply(200, {"message": "Check your phone"})
    (amount_err, phone_err, text, banner_style, expect_style,
     label, amount, phone) = callbacks.submit_payment(1, 100, "0712345678", session)
    assert (amount_err, phone_err) == ("", "")
    assert text == "Check your phone"
    assert banner_style == layouts.banner_style("success")
    assert expect_style == layouts.EXPECT_STYLE
    assert label == layouts.PAY_DONE_LABEL
    assert (amount, phone) == ("", "")
    assert http.last["headers"]["Authorization"] == "Bearer tok-123"


def test_payment_401_shows_session_expired(http, session):
    http.reply(401, {"error": "token expired"})
    result = callbacks.submit_payment(1, 100, "0712345678", session)
    assert result[2] == "Session expired. Please login again."
    assert result[3] == layouts.banner_style("danger")
    assert result[6] is no_update


def test_payment_network_error(network_down, session):
    result = callbacks.submit_payment(1, 100, "0712345678", session)
    assert result[2] == "Network error. Please check your connection."


def test_payment_inline_errors(http):
    result = callbacks.submit_payment(1, 5, "12345", None)
    assert result[0] == "Minimum amount is KSh 10"
    assert result[1] == "Please enter a valid Kenyan phone number"
    assert result[3] == layouts.HIDDEN
    assert http.calls == []


def test_dismiss_banner():
    assert callbacks.dismiss_banner(1) == layouts.HIDDEN
    assert callbacks.clear_field_error("12") == ""


# ----------------------------
# Product checkout
# ----------------------------
def test_submit_opens_confirmation(product):
    result = callbacks.checkout_dialog("checkout-submit", "0712345678", product)
    assert result[0] == layouts.MODAL_STYLE
    assert result[1] == "0712345678"


def test_submit_with_bad_phone_shows_error(product):
    result = callbacks.checkout_dialog("checkout-submit", "12345", product)
    assert result[0] == layouts.HIDDEN
    assert "Safaricom" in text_of(result[2])


def test_confirm_queues_request_and_starts_progress(product):
    result = callbacks.checkout_dialog("checkout-confirm", "0712345678", product, now=1.5)
    assert result[0] == layouts.HIDDEN
    assert result[4] == {"phone": "0712345678", "request_id": "TTOK1500"}
    assert result[5] is False
    assert result[6] == 0
    assert result[7] == layouts.PROGRESS_WRAP_STYLE


def test_cancel_closes_confirmation(product):
    assert callbacks.checkout_dialog("checkout-cancel", "", product)[0] == layouts.HIDDEN


def test_run_checkout_success(http, product, session):
    http.reply(200, {"checkout_id": "ws_CO_9"})
    error, success, tick_disabled, progress_style, phone, checkout_id = callbacks.run_checkout(
        {"phone": "0712345678", "request_id": "TTOK1"}, product, session)
    assert error is None
    assert payments.CHECKOUT_SUCCESS in text_of(success)
    assert tick_disabled is True
    assert progress_style == layouts.HIDDEN
    assert phone == ""
    assert checkout_id == "Checkout ID: ws_CO_9"


def test_run_checkout_failure(http, product, session):
    http.reply(400, {"error": "Invalid phone"})
    error, success, _, _, phone, _ = callbacks.run_checkout(
        {"phone": "0712345678", "request_id": "TTOK1"}, product, session)
    assert "Invalid phone" in text_of(error)
    assert success is None
    assert phone is no_update


def test_checkout_progress():
    style, label = callbacks.checkout_progress(4)
    assert style["width"] == "40%"
    assert label == "40%"
