"""
Dash callbacks.

Each handler is a plain function of its inputs so it can be exercised without
a browser; register_callbacks() wires them onto the app.
"""
import base64
import binascii
import logging

from dash import ALL, Input, Output, State, ctx, html, no_update
from dash.exceptions import PreventUpdate

from shopease import api, carousel, layouts, payments
from shopease.catalog import (
    filter_products,
    product_by_id,
    products_frame,
    sort_products,
    to_records,
)
from shopease.session import empty_session, is_logged_in, session_from_signin, token_of
from shopease.validation import validate_login, validate_product, validate_registration

logger = logging.getLogger(__name__)

# ----------------------------
# Page router
# ----------------------------
ROUTES = {
    '/': layouts.products_page,
    '/login': layouts.login_layout,
    '/register': layouts.register_layout,
    '/addproduct': layouts.add_product_layout,
    '/mpesapayment': layouts.payment_layout,
}


def normalize_path(pathname):
    path = (pathname or '/').rstrip('/').lower()
    return path or '/'


def display_page(pathname, product):
    path = normalize_path(pathname)
    if path == '/checkout':
        return layouts.checkout_layout(product)
    page = ROUTES.get(path)
    if page is None:
        return layouts.not_found_layout(pathname)
    return page()


# ----------------------------
# Navbar
# ----------------------------
def render_navbar(session):
    return layouts.navbar(session)


def logout(n_clicks):
    if not n_clicks:
        raise PreventUpdate
    logger.info("User logged out")
    return empty_session(), '/'


# ----------------------------
# Carousel
# ----------------------------
CAROUSEL_ACTIONS = {
    'carousel-interval': carousel.TICK,
    'carousel-prev': carousel.PREV,
    'carousel-next': carousel.NEXT,
    'carousel-rotate': carousel.TOGGLE_ROTATE,
    'carousel-fade': carousel.TOGGLE_FADE,
}


def carousel_action(trigger_id, state):
    if trigger_id is None:
        raise PreventUpdate
    if isinstance(trigger_id, dict):
        return carousel.step(state, carousel.SELECT, trigger_id['index'])
    return carousel.step(state, CAROUSEL_ACTIONS[trigger_id])


def render_carousel(state):
    state = dict(carousel.initial_state(), **(state or {}))
    indicators = [layouts.indicator_style(i == state['index']) for i in range(len(carousel.SLIDES))]
    return (
        layouts.carousel_slide(state),
        indicators,
        '⏸' if state['auto_rotate'] else '▶',
        '☀' if state['fade'] else '⇄',
        not state['auto_rotate'],
    )


# ----------------------------
# Products
# ----------------------------
def load_products(pathname):
    if normalize_path(pathname) != '/':
        raise PreventUpdate
    result = api.fetch_products()
    if not result['success']:
        return {'items': [], 'error': f"Could not load products: {result['error']}"}
    return {'items': to_records(products_frame(result['products'])), 'error': ''}


def render_products(store, query, order):
    store = store or {}
    if store.get('error'):
        return [], store['error']
    items = store.get('items') or []
    df = sort_products(filter_products(products_frame(items), query), order)
    if df.empty:
        return [], "No products match your search." if items else "No products available yet."
    return [layouts.product_card(p) for p in to_records(df)], f"{len(df)} product(s)"


def choose_product(trigger_id, clicks, items):
    """Buy Now: remember the product and go to checkout."""
    if not trigger_id or not clicks:
        raise PreventUpdate
    product = product_by_id(items, trigger_id['index'])
    if product is None:
        raise PreventUpdate
    return product, '/checkout'


# ----------------------------
# Accounts
# ----------------------------
def login(n_clicks, username, password):
    if not n_clicks:
        raise PreventUpdate
    errors = validate_login(username, password)
    if errors:
        return layouts.form_errors(errors), no_update, no_update

    result = api.sign_in(username.strip(), password)
    if not result['success']:
        return layouts.banner(result['error'], 'danger'), no_update, no_update
    session = session_from_signin(result['data'])
    if session is None:
        message = result['data'].get('message') or "Invalid username or password."
        return layouts.banner(message, 'danger'), no_update, no_update
    logger.info("User %s signed in", username.strip())
    return layouts.banner("Login successful.", 'success'), session, '/'


def register(n_clicks, username, email, phone, password):
    if not n_clicks:
        raise PreventUpdate
    errors = validate_registration(username, email, password, phone)
    if errors:
        return layouts.form_errors(errors)

    result = api.sign_up(username.strip(), email.strip(), password, phone.strip())
    if not result['success']:
        return layouts.banner(result['error'], 'danger')
    data = result['data']
    message = data.get('success') or data.get('message') or "Registration successful. You can now log in."
    return html.Div([layouts.banner(message, 'success'), html.Div(html.A("Go to login", href='/login'))])


def _decode_upload(contents):
    try:
        return base64.b64decode(contents.split(',', 1)[1])
    except (IndexError, binascii.Error):
        return None


def add_product(n_clicks, name, description, cost, contents, filename, session):
    if not n_clicks:
        raise PreventUpdate
    if not is_logged_in(session):
        return layouts.banner("Please login to add products.", 'danger')
    errors = validate_product(name, description, cost, filename)
    if errors:
        return layouts.form_errors(errors)
    content = _decode_upload(contents or '')
    if content is None:
        return layouts.banner("The selected photo could not be read.", 'danger')

    result = api.add_product(name.strip(), description.strip(), cost, filename, content, token=token_of(session))
    if not result['success']:
        return layouts.banner(result['error'], 'danger')
    return layouts.banner(result['data'].get('success') or "Product added successfully.", 'success')


# ----------------------------
# Payment form
# ----------------------------
def submit_payment(n_clicks, amount, phone, session):
    """
    Returns (amount error, phone error, banner text, banner style,
             what-to-expect style, button label, amount value, phone value).
    """
    if not n_clicks:
        raise PreventUpdate
    outcome = payments.submit_payment(amount, phone, token=token_of(session))
    errors = outcome['errors']
    if errors:
        return (errors.get('amount', ''), errors.get('phone', ''), '', layouts.HIDDEN,
                layouts.HIDDEN, layouts.PAY_LABEL, no_update, no_update)
    if outcome['success']:
        return ('', '', outcome['message'], layouts.banner_style('success'),
                layouts.EXPECT_STYLE, layouts.PAY_DONE_LABEL, '', '')
    return ('', '', outcome['message'], layouts.banner_style('danger'),
            layouts.HIDDEN, layouts.PAY_LABEL, no_update, no_update)


def clear_field_error(value):
    return ''


def dismiss_banner(n_clicks):
    if not n_clicks:
        raise PreventUpdate
    return layouts.HIDDEN


# ----------------------------
# Product checkout
# ----------------------------
def checkout_dialog(trigger_id, phone, product, now=None):
    """
    Submit opens the confirmation dialog, Cancel closes it, Confirm closes it
    and queues the request.

    Returns (dialog style, dialog phone, error, success, request,
             tick disabled, tick count, progress style).
    """
    if trigger_id == 'checkout-submit':
        outcome = payments.prepare_checkout(product, phone)
        if not outcome['success']:
            return (layouts.HIDDEN, no_update, layouts.banner(outcome['message'], 'danger'), None,
                    no_update, no_update, no_update, no_update)
        return (layouts.MODAL_STYLE, str(phone).strip(), None, None,
                no_update, no_update, no_update, no_update)
    if trigger_id == 'checkout-cancel':
        return (layouts.HIDDEN, no_update, no_update, no_update,
                no_update, no_update, no_update, no_update)
    if trigger_id == 'checkout-confirm':
        request = {'phone': str(phone or '').strip(), 'request_id': payments.checkout_request_id(now)}
        return (layouts.HIDDEN, no_update, None, None,
                request, False, 0, layouts.PROGRESS_WRAP_STYLE)
    raise PreventUpdate


def run_checkout(request, product, session):
    """Returns (error, success, tick disabled, progress style, phone value, checkout id text)."""
    if not request or not product:
        raise PreventUpdate
    outcome = payments.confirm_checkout(product, request['phone'], request_id=request['request_id'],
                                        token=token_of(session))
    if not outcome['success']:
        return (layouts.banner(outcome['message'], 'danger'), None, True, layouts.HIDDEN,
                no_update, '')
    checkout_id = outcome['checkout_id']
    return (None, layouts.banner(outcome['message'], 'success'), True, layouts.HIDDEN,
            '', f"Checkout ID: {checkout_id}" if checkout_id else '')


def checkout_progress(n_intervals):
    percent = payments.progress_for_tick(n_intervals)
    return layouts.progress_bar_style(percent), f"{percent}%"


# ----------------------------
# Registration on the app
# ----------------------------
def register_callbacks(app):
    app.callback(Output('page-content', 'children'),
                 Input('url', 'pathname'),
                 State('selected-product', 'data'))(display_page)

    app.callback(Output('navbar', 'children'),
                 Input('session', 'data'))(render_navbar)

    app.callback(Output('session', 'data', allow_duplicate=True),
                 Output('url', 'pathname', allow_duplicate=True),
                 Input('logout-btn', 'n_clicks'),
                 prevent_initial_call=True)(logout)

    @app.callback(Output('carousel-state', 'data'),
                  Input('carousel-interval', 'n_intervals'),
                  Input('carousel-prev', 'n_clicks'),
                  Input('carousel-next', 'n_clicks'),
                  Input({'type': 'carousel-indicator', 'index': ALL}, 'n_clicks'),
                  Input('carousel-rotate', 'n_clicks'),
                  Input('carousel-fade', 'n_clicks'),
                  State('carousel-state', 'data'),
                  prevent_initial_call=True)
    def _carousel(_tick, _prev, _next, _indicators, _rotate, _fade, state):
        return carousel_action(ctx.triggered_id, state)

    app.callback(Output('carousel-slide', 'children'),
                 Output({'type': 'carousel-indicator', 'index': ALL}, 'style'),
                 Output('carousel-rotate', 'children'),
                 Output('carousel-fade', 'children'),
                 Output('carousel-interval', 'disabled'),
                 Input('carousel-state', 'data'))(render_carousel)

    app.callback(Output('products', 'data'),
                 Input('url', 'pathname'))(load_products)

    app.callback(Output('product-grid', 'children'),
                 Output('products-status', 'children'),
                 Input('products', 'data'),
                 Input('product-search', 'value'),
                 Input('product-sort', 'value'))(render_products)

    @app.callback(Output('selected-product', 'data'),
                  Output('url', 'pathname', allow_duplicate=True),
                  Input({'type': 'buy-product', 'index': ALL}, 'n_clicks'),
                  State('products', 'data'),
                  prevent_initial_call=True)
    def _buy(_clicks, store):
        clicks = ctx.triggered[0]['value'] if ctx.triggered else None
        return choose_product(ctx.triggered_id, clicks, (store or {}).get('items'))

    app.callback(Output('login-message', 'children'),
                 Output('session', 'data', allow_duplicate=True),
                 Output('url', 'pathname', allow_duplicate=True),
                 Input('login-btn', 'n_clicks'),
                 State('login-username', 'value'),
                 State('login-password', 'value'),
                 prevent_initial_call=True)(login)

    app.callback(Output('register-message', 'children'),
                 Input('register-btn', 'n_clicks'),
                 State('reg-username', 'value'),
                 State('reg-email', 'value'),
                 State('reg-phone', 'value'),
                 State('reg-password', 'value'),
                 prevent_initial_call=True)(register)

    app.callback(Output('add-product-message', 'children'),
                 Input('add-product-btn', 'n_clicks'),
                 State('product-name', 'value'),
                 State('product-description', 'value'),
                 State('product-cost', 'value'),
                 State('product-photo', 'contents'),
                 State('product-photo', 'filename'),
                 State('session', 'data'),
                 prevent_initial_call=True)(add_product)

    app.callback(Output('product-photo-name', 'children'),
                 Input('product-photo', 'filename'),
                 prevent_initial_call=True)(lambda filename: filename or '')

    app.callback(Output('pay-amount-error', 'children'),
                 Output('pay-phone-error', 'children'),
                 Output('pay-banner-text', 'children'),
                 Output('pay-banner', 'style'),
                 Output('pay-expect', 'style'),
                 Output('pay-submit', 'children'),
                 Output('pay-amount', 'value'),
                 Output('pay-phone', 'value'),
                 Input('pay-submit', 'n_clicks'),
                 State('pay-amount', 'value'),
                 State('pay-phone', 'value'),
                 State('session', 'data'),
                 running=[(Output('pay-submit', 'disabled'), True, False)],
                 prevent_initial_call=True)(submit_payment)

    app.callback(Output('pay-amount-error', 'children', allow_duplicate=True),
                 Input('pay-amount', 'value'),
                 prevent_initial_call=True)(clear_field_error)

    app.callback(Output('pay-phone-error', 'children', allow_duplicate=True),
                 Input('pay-phone', 'value'),
                 prevent_initial_call=True)(clear_field_error)

    app.callback(Output('pay-banner', 'style', allow_duplicate=True),
                 Input('pay-banner-close', 'n_clicks'),
                 prevent_initial_call=True)(dismiss_banner)

    @app.callback(Output('checkout-modal', 'style'),
                  Output('checkout-modal-phone', 'children'),
                  Output('checkout-error', 'children'),
                  Output('checkout-success', 'children'),
                  Output('checkout-request', 'data'),
                  Output('checkout-tick', 'disabled'),
                  Output('checkout-tick', 'n_intervals'),
                  Output('checkout-progress-wrap', 'style'),
                  Input('checkout-submit', 'n_clicks'),
                  Input('checkout-cancel', 'n_clicks'),
                  Input('checkout-confirm', 'n_clicks'),
                  State('checkout-phone', 'value'),
                  State('selected-product', 'data'),
                  prevent_initial_call=True)
    def _checkout_dialog(_submit, _cancel, _confirm, phone, product):
        return checkout_dialog(ctx.triggered_id, phone, product)

    app.callback(Output('checkout-error', 'children', allow_duplicate=True),
                 Output('checkout-success', 'children', allow_duplicate=True),
                 Output('checkout-tick', 'disabled', allow_duplicate=True),
                 Output('checkout-progress-wrap', 'style', allow_duplicate=True),
                 Output('checkout-phone', 'value'),
                 Output('checkout-id', 'children'),
                 Input('checkout-request', 'data'),
                 State('selected-product', 'data'),
                 State('session', 'data'),
                 running=[(Output('checkout-submit', 'disabled'), True, False)],
                 prevent_initial_call=True)(run_checkout)

    app.callback(Output('checkout-progress-bar', 'style'),
                 Output('checkout-progress-label', 'children'),
                 Input('checkout-tick', 'n_intervals'))(checkout_progress)
