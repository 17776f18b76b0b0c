from dash import dcc, html

from shopease import config
from shopease.carousel import SLIDES
from shopease.catalog import SORT_OPTIONS, format_price, photo_url
from shopease.payments import checkout_amount
from shopease.session import display_name, first_name, is_logged_in

# ----------------------------
# Styles
# ----------------------------
PRIMARY = '#0d6efd'
SUCCESS = '#198754'
DANGER = '#dc3545'
DARK = '#212529'
MUTED = '#6c757d'

APP_STYLE = {'backgroundColor': '#f8f9fa', 'color': DARK, 'fontFamily': 'Segoe UI, sans-serif', 'minHeight': '100vh'}
PAGE_STYLE = {'maxWidth': '1100px', 'margin': '0 auto', 'padding': '30px 20px'}
CARD_STYLE = {'backgroundColor': 'white', 'borderRadius': '10px', 'padding': '20px',
              'boxShadow': '0 4px 14px rgba(0,0,0,0.08)', 'marginBottom': '16px'}
FORM_STYLE = {**CARD_STYLE, 'maxWidth': '560px', 'margin': '0 auto'}
INPUT_STYLE = {'width': '100%', 'padding': '8px 10px', 'marginBottom': '4px',
               'border': '1px solid #ced4da', 'borderRadius': '6px', 'boxSizing': 'border-box'}
LABEL_STYLE = {'fontWeight': '600', 'display': 'block', 'marginTop': '12px', 'marginBottom': '4px'}
ERROR_STYLE = {'color': DANGER, 'fontSize': '0.85rem', 'minHeight': '1em'}
HINT_STYLE = {'color': MUTED, 'fontSize': '0.85rem'}
NAV_LINK_STYLE = {'padding': '8px 14px', 'color': 'white', 'textDecoration': 'none', 'fontWeight': '600'}
HIDDEN = {'display': 'none'}


def button_style(color=PRIMARY, outline=False, block=False):
    style = {'backgroundColor': 'transparent' if outline else color,
             'color': color if outline else 'white',
             'border': f'1px solid {color}', 'borderRadius': '8px',
             'padding': '10px 16px', 'cursor': 'pointer', 'fontWeight': '600',
             'textDecoration': 'none', 'display': 'inline-block'}
    if block:
        style.update({'width': '100%', 'display': 'block', 'textAlign': 'center'})
    return style


def banner_style(variant):
    if not variant:
        return HIDDEN
    color = {'success': SUCCESS, 'danger': DANGER, 'warning': '#997404'}[variant]
    background = {'success': '#d1e7dd', 'danger': '#f8d7da', 'warning': '#fff3cd'}[variant]
    return {'backgroundColor': background, 'color': color, 'border': f'1px solid {color}',
            'borderRadius': '8px', 'padding': '12px 16px', 'marginBottom': '16px',
            'display': 'flex', 'justifyContent': 'space-between', 'alignItems': 'center'}


def banner(message, variant):
    icon = '✔ ' if variant == 'success' else '✖ '
    return html.Div(icon + message, style=banner_style(variant))


def field(label, component, error_id=None, hint=None):
    children = [html.Label(label, style=LABEL_STYLE), component]
    if hint:
        children.append(html.Div(hint, style=HINT_STYLE))
    if error_id:
        children.append(html.Div(id=error_id, style=ERROR_STYLE))
    return html.Div(children)


# ----------------------------
# Navbar
# ----------------------------
def navbar(session):
    left = html.Div([
        dcc.Link(config.BRAND, href='/', style={**NAV_LINK_STYLE, 'fontSize': '1.3rem'}),
        dcc.Link("Home", href='/', style=NAV_LINK_STYLE),
        dcc.Link("About", href='/about', style=NAV_LINK_STYLE),
        dcc.Link("Contact", href='/contact', style=NAV_LINK_STYLE),
    ], style={'display': 'flex', 'alignItems': 'center'})

    if is_logged_in(session):
        user = session['user']
        right = html.Div([
            dcc.Link("🛒 Cart", href='/cart', style=NAV_LINK_STYLE),
            html.Details([
                html.Summary(first_name(user), style={**NAV_LINK_STYLE, 'cursor': 'pointer'}),
                html.Div([
                    html.Div(display_name(user), style={'fontWeight': 'bold'}),
                    html.Small(user.get('email', ''), style={'color': MUTED}),
                    html.Hr(),
                    dcc.Link("My Profile", href='/profile', style={'display': 'block'}),
                    dcc.Link("My Orders", href='/orders', style={'display': 'block'}),
                    dcc.Link("Settings", href='/settings', style={'display': 'block'}),
                    dcc.Link("Add Product", href='/AddProduct', style={'display': 'block'}),
                    html.Hr(),
                    html.Button("Logout", id='logout-btn', n_clicks=0, style=button_style(DANGER, outline=True)),
                ], style={**CARD_STYLE, 'position': 'absolute', 'right': '0', 'minWidth': '200px',
                          'color': DARK, 'zIndex': 10}),
            ], style={'position': 'relative'}),
        ], id='nav-user', style={'display': 'flex', 'alignItems': 'center'})
    else:
        right = html.Div([
            dcc.Link("Login", href='/login', style={**button_style('white', outline=True), 'marginRight': '8px'}),
            dcc.Link("Register", href='/register', style=button_style(PRIMARY)),
        ], id='nav-guest', style={'display': 'flex', 'alignItems': 'center'})

    return html.Div([left, right], style={'backgroundColor': DARK, 'display': 'flex',
                                          'justifyContent': 'space-between', 'alignItems': 'center',
                                          'padding': '12px 24px'})


# ----------------------------
# Carousel
# ----------------------------
def carousel_frame():
    """Static controls; the slide itself is filled in by a callback."""
    control = {**button_style(DARK), 'padding': '6px 12px'}
    return html.Div([
        html.Div(id='carousel-slide'),
        html.Button("‹", id='carousel-prev', n_clicks=0,
                    style={**control, 'position': 'absolute', 'left': '16px', 'top': '45%'}),
        html.Button("›", id='carousel-next', n_clicks=0,
                    style={**control, 'position': 'absolute', 'right': '16px', 'top': '45%'}),
        html.Div([
            html.Button(id={'type': 'carousel-indicator', 'index': i}, n_clicks=0)
            for i in range(len(SLIDES))
        ], style={'position': 'absolute', 'bottom': '12px', 'left': '50%',
                  'transform': 'translateX(-50%)', 'display': 'flex', 'gap': '8px'}),
        html.Div([
            html.Button(id='carousel-rotate', n_clicks=0, style=button_style('white', outline=True)),
            html.Button(id='carousel-fade', n_clicks=0,
                        style={**button_style('white', outline=True), 'marginLeft': '8px'}),
        ], style={'position': 'absolute', 'top': '12px', 'right': '12px'}),
        dcc.Interval(id='carousel-interval', interval=config.CAROUSEL_INTERVAL_MS, n_intervals=0),
    ], style={'position': 'relative', 'overflow': 'hidden'})


def carousel_slide(state):
    slide = SLIDES[state['index']]
    return html.Div([
        html.Img(src=f"/assets/{slide['path']}", alt=slide['alt'],
                 style={'display': 'block', 'width': '100%', 'height': '70vh',
                        'objectFit': 'cover', 'filter': 'brightness(0.95)'}),
        html.Div([
            html.H3(slide['title'], style={'fontSize': '2.2rem', 'marginBottom': '10px'}),
            html.P(slide['description']),
            dcc.Link("Shop Now →", href='/', style=button_style('white', outline=True)),
        ], style={'position': 'absolute', 'bottom': '50px', 'left': '50%', 'transform': 'translateX(-50%)',
                  'backgroundColor': 'rgba(33,37,41,0.75)', 'color': 'white',
                  'borderRadius': '12px', 'padding': '24px', 'textAlign': 'center'}),
    ], className='carousel-fade' if state['fade'] else 'carousel-slide')


def indicator_style(active):
    return {'width': '12px', 'height': '12px', 'borderRadius': '50%', 'padding': '0',
            'border': '1px solid white', 'cursor': 'pointer',
            'backgroundColor': '#ffc107' if active else '#f8f9fa'}


# ----------------------------
# Footer
# ----------------------------
def footer():
    return html.Footer([
        html.Div(f"© {config.BRAND}. All rights reserved."),
        html.Small("Payments are processed securely by M-Pesa.", style={'color': '#adb5bd'}),
    ], style={'backgroundColor': DARK, 'color': 'white', 'textAlign': 'center', 'padding': '24px'})


# ----------------------------
# Products
# ----------------------------
def products_page():
    return html.Div([
        html.H2("Available Products"),
        html.Div([
            dcc.Input(id='product-search', type='text', placeholder='Search products...',
                      debounce=True, style={**INPUT_STYLE, 'width': '60%'}),
            dcc.Dropdown(id='product-sort', options=SORT_OPTIONS, value='featured',
                         clearable=False, style={'width': '35%'}),
        ], style={'display': 'flex', 'justifyContent': 'space-between', 'gap': '12px', 'marginBottom': '20px'}),
        html.Div(id='products-status', style=HINT_STYLE),
        html.Div(id='product-grid', style={'display': 'grid', 'gap': '16px',
                                          'gridTemplateColumns': 'repeat(auto-fill, minmax(240px, 1fr))'}),
    ], style=PAGE_STYLE)


def product_card(product):
    image = photo_url(product.get('photo'))
    return html.Div([
        html.Img(src=image, alt=product['name'],
                 style={'width': '100%', 'height': '200px', 'objectFit': 'cover', 'borderRadius': '8px'})
        if image else None,
        html.H5(product['name'], style={'marginTop': '12px'}),
        html.P(product.get('description', ''), style={'color': MUTED}),
        html.B(format_price(product['price']), style={'color': SUCCESS}),
        html.Button("Buy Now", id={'type': 'buy-product', 'index': product['id']}, n_clicks=0,
                    style={**button_style(SUCCESS, block=True), 'marginTop': '12px'}),
    ], style=CARD_STYLE)


# ----------------------------
# Accounts
# ----------------------------
def login_layout():
    return html.Div(html.Div([
        html.H2("Sign In", style={'textAlign': 'center'}),
        field("Username", dcc.Input(id='login-username', type='text', style=INPUT_STYLE)),
        field("Password", dcc.Input(id='login-password', type='password', style=INPUT_STYLE)),
        html.Button("Sign In", id='login-btn', n_clicks=0,
                    style={**button_style(block=True), 'marginTop': '20px'}),
        html.Div(id='login-message', style={'marginTop': '12px'}),
        html.P(["Don't have an account? ", dcc.Link("Register", href='/register')],
               style={'marginTop': '12px', 'textAlign': 'center'}),
    ], style=FORM_STYLE), style=PAGE_STYLE)


def register_layout():
    return html.Div(html.Div([
        html.H2("Create Account", style={'textAlign': 'center'}),
        field("Username", dcc.Input(id='reg-username', type='text', style=INPUT_STYLE)),
        field("Email", dcc.Input(id='reg-email', type='email', style=INPUT_STYLE)),
        field("Phone Number", dcc.Input(id='reg-phone', type='tel', placeholder='e.g., 0712345678',
                                        style=INPUT_STYLE)),
        field("Password", dcc.Input(id='reg-password', type='password', style=INPUT_STYLE)),
        html.Button("Register", id='register-btn', n_clicks=0,
                    style={**button_style(block=True), 'marginTop': '20px'}),
        html.Div(id='register-message', style={'marginTop': '12px'}),
        html.P(["Already have an account? ", dcc.Link("Sign in", href='/login')],
               style={'marginTop': '12px', 'textAlign': 'center'}),
    ], style=FORM_STYLE), style=PAGE_STYLE)


def form_errors(errors):
    return html.Ul([html.Li(message) for message in errors.values()], style={'color': DANGER})


# ----------------------------
# Payment form (amount + phone)
# ----------------------------
PAY_LABEL = "Pay with M-Pesa"
PAY_DONE_LABEL = "✔ Payment Initiated"


def payment_layout():
    return html.Div([
        dcc.Link("← Back to Home", href='/', style={**button_style(MUTED, outline=True), 'marginBottom': '16px'}),
        html.Div([
            html.H2("M-Pesa Payment", style={'textAlign': 'center'}),
            html.Div([
                html.Span(id='pay-banner-text'),
                html.Button("×", id='pay-banner-close', n_clicks=0,
                            style={'background': 'none', 'border': 'none', 'fontSize': '1.3rem', 'cursor': 'pointer'}),
            ], id='pay-banner', style=HIDDEN),
            field("Amount (KSh) *",
                  dcc.Input(id='pay-amount', type='number', min=config.MIN_AMOUNT, step=1,
                            placeholder='Enter amount', style=INPUT_STYLE),
                  error_id='pay-amount-error'),
            field("Phone Number *",
                  dcc.Input(id='pay-phone', type='tel', placeholder='e.g., 0712345678 or 254712345678',
                            style=INPUT_STYLE),
                  error_id='pay-phone-error',
                  hint="Enter your M-Pesa registered phone number"),
            html.Button(PAY_LABEL, id='pay-submit', n_clicks=0,
                        style={**button_style(block=True), 'marginTop': '20px'}),
            html.Div([
                html.H5("What to Expect:"),
                html.Ol([
                    html.Li("You will receive an M-Pesa push notification"),
                    html.Li("Enter your M-Pesa PIN when prompted"),
                    html.Li("Wait for payment confirmation SMS"),
                ]),
                html.P("If you don't receive the prompt, dial *234*1# to initiate the payment manually.",
                       style={'color': MUTED, 'marginBottom': '0'}),
            ], id='pay-expect', style=HIDDEN),
        ], style=FORM_STYLE),
    ], style=PAGE_STYLE)


EXPECT_STYLE = {'backgroundColor': '#f1f3f5', 'borderRadius': '8px', 'padding': '16px', 'marginTop': '20px'}


# ----------------------------
# Product checkout
# ----------------------------
def checkout_layout(product):
    if not product:
        return html.Div([
            html.Div("No product selected. Please go back and select a product to purchase.",
                     style=banner_style('warning')),
            dcc.Link("Browse Products", href='/', style=button_style()),
        ], style={**PAGE_STYLE, 'textAlign': 'center'})

    amount = checkout_amount(product)
    return html.Div([
        html.Div([
            html.H3("📱 M-Pesa Payment Gateway",
                    style={'backgroundColor': SUCCESS, 'color': 'white', 'margin': '-20px -20px 20px',
                           'padding': '16px', 'textAlign': 'center', 'borderRadius': '10px 10px 0 0'}),
            html.Div([
                html.Div([html.B("Product: "), product['name']]),
                html.Div([html.B("Unit Price: "), format_price(product['price'])]),
                html.Hr(),
                html.H5(f"Total: {config.CURRENCY} {amount}", style={'textAlign': 'right', 'color': SUCCESS}),
            ], style={'border': f'1px solid {SUCCESS}', 'borderRadius': '8px', 'padding': '12px',
                      'marginBottom': '16px'}),
            html.Div(id='checkout-error'),
            html.Div(id='checkout-success'),
            html.Div(id='checkout-id', style=HINT_STYLE),
            html.Div([
                html.Div([html.Span("Processing payment..."), html.Span(id='checkout-progress-label')],
                         style={'display': 'flex', 'justifyContent': 'space-between', 'marginBottom': '6px'}),
                html.Div(html.Div(id='checkout-progress-bar', style=progress_bar_style(0)),
                         style={'backgroundColor': '#e9ecef', 'borderRadius': '6px', 'height': '14px'}),
            ], id='checkout-progress-wrap', style=HIDDEN),
            field("Safaricom Phone Number",
                  dcc.Input(id='checkout-phone', type='tel', placeholder='e.g., 07XXXXXXXX', style=INPUT_STYLE),
                  hint="Enter your Safaricom number registered with M-Pesa"),
            html.Button(f"🛡 Pay {config.CURRENCY} {amount} via M-Pesa", id='checkout-submit', n_clicks=0,
                        style={**button_style(SUCCESS, block=True), 'marginTop': '20px'}),
            html.Small("Your payment is securely processed by M-Pesa",
                       style={**HINT_STYLE, 'display': 'block', 'textAlign': 'center', 'marginTop': '16px'}),
        ], style=FORM_STYLE),
        confirmation_dialog(product, amount),
        dcc.Interval(id='checkout-tick', interval=config.PROGRESS_TICK_MS, n_intervals=0,
                     max_intervals=100 // config.PROGRESS_STEP, disabled=True),
        dcc.Store(id='checkout-request'),
    ], style=PAGE_STYLE)


def confirmation_dialog(product, amount):
    return html.Div(html.Div([
        html.H4("Confirm Payment", style={'color': SUCCESS}),
        html.P("You are about to initiate an M-Pesa payment of:"),
        html.H4(f"{config.CURRENCY} {amount}", style={'textAlign': 'center'}),
        html.P(f"for {product['name']}"),
        html.P(["to phone number: ", html.Strong(id='checkout-modal-phone')]),
        html.P("You will receive an M-Pesa prompt on your phone to complete the payment.", style=HINT_STYLE),
        html.Div([
            html.Button("Cancel", id='checkout-cancel', n_clicks=0, style=button_style(MUTED, outline=True)),
            html.Button("Confirm Payment", id='checkout-confirm', n_clicks=0, style=button_style(SUCCESS)),
        ], style={'display': 'flex', 'justifyContent': 'flex-end', 'gap': '8px'}),
    ], style={**CARD_STYLE, 'maxWidth': '460px', 'margin': '15vh auto'}),
        id='checkout-modal', style=HIDDEN)


MODAL_STYLE = {'position': 'fixed', 'inset': '0', 'backgroundColor': 'rgba(0,0,0,0.5)', 'zIndex': 100}
PROGRESS_WRAP_STYLE = {'marginBottom': '16px'}


def progress_bar_style(percent):
    return {'width': f'{percent}%', 'height': '100%', 'backgroundColor': SUCCESS,
            'borderRadius': '6px', 'transition': 'width 0.3s'}


# ----------------------------
# Add product
# ----------------------------
def add_product_layout():
    return html.Div(html.Div([
        html.H2("Add Product", style={'textAlign': 'center'}),
        field("Product Name", dcc.Input(id='product-name', type='text', style=INPUT_STYLE)),
        field("Description", dcc.Textarea(id='product-description', style={**INPUT_STYLE, 'height': 100})),
        field("Cost (KSh)", dcc.Input(id='product-cost', type='number', min=1, style=INPUT_STYLE)),
        field("Photo", dcc.Upload(id='product-photo', accept='image/*',
                                  children=html.Div(["Drag and drop or ", html.A("select a photo")]),
                                  style={'border': '1px dashed #ced4da', 'borderRadius': '6px',
                                         'padding': '16px', 'textAlign': 'center'})),
        html.Div(id='product-photo-name', style=HINT_STYLE),
        html.Button("Add Product", id='add-product-btn', n_clicks=0,
                    style={**button_style(block=True), 'marginTop': '20px'}),
        html.Div(id='add-product-message', style={'marginTop': '12px'}),
    ], style=FORM_STYLE), style=PAGE_STYLE)


def not_found_layout(pathname):
    return html.Div([
        html.H2("Page not found"),
        html.P(f"Nothing lives at {pathname}."),
        dcc.Link("Back to products", href='/'),
    ], style={**PAGE_STYLE, 'textAlign': 'center'})


# ----------------------------
# App shell
# ----------------------------
def shell(session_data, carousel_state):
    return html.Div([
        dcc.Store(id='session', storage_type='local', data=session_data),
        dcc.Store(id='selected-product', storage_type='session'),
        dcc.Store(id='products', data={'items': [], 'error': ''}),
        dcc.Store(id='carousel-state', data=carousel_state),
        dcc.Location(id='url', refresh=False),
        html.Div(id='navbar', children=navbar(session_data)),
        carousel_frame(),
        html.Div(id='page-content'),
        footer(),
    ], style=APP_STYLE)
