from shopease import catalog

API_PRODUCTS = [
    {"product_id": 3, "product_name": "Air Force 1", "product_description": "Classic white",
     "product_cost": "4500", "product_photo": "af1.jpg"},
    {"product_id": 1, "product_name": "Jordan 4", "product_description": "Retro basketball",
     "product_cost": 9800, "product_photo": "j4.jpg"},
    {"product_id": 2, "product_name": "Blazer", "product_description": "Vintage white suede",
     "product_cost": "1200.50", "product_photo": "https://cdn.example.com/blazer.jpg"},
    {"product_id": 4, "product_name": "", "product_description": "no name", "product_cost": 10},
    {"product_id": 5, "product_name": "Mystery", "product_description": "", "product_cost": "free"},
]


def test_products_frame_normalizes_and_drops_bad_rows():
    df = catalog.products_frame(API_PRODUCTS)
    assert list(df.columns) == catalog.COLUMNS
    assert list(df["name"]) == ["Air Force 1", "Jordan 4", "Blazer"]
    assert list(df["price"]) == [4500.0, 9800.0, 1200.5]
    assert list(df["id"]) == ["3", "1", "2"]


def test_products_frame_empty():
    df = catalog.products_frame([])
    assert df.empty
    assert list(df.columns) == catalog.COLUMNS


def test_missing_ids_fall_back_to_position():
    df = catalog.products_frame([{"product_name": "A", "product_cost": 1},
                                 {"product_name": "B", "product_cost": 2}])
    assert list(df["id"]) == ["0", "1"]


def test_filter_matches_name_and_description():
    df = catalog.products_frame(API_PRODUCTS)
    assert list(catalog.filter_products(df, "white")["name"]) == ["Air Force 1", "Blazer"]
    assert list(catalog.filter_products(df, "JORDAN")["name"]) == ["Jordan 4"]
    assert len(catalog.filter_products(df, "  ")) == 3


def test_sort_orders():
    df = catalog.products_frame(API_PRODUCTS)
    assert list(catalog.sort_products(df, "price-asc")["name"]) == ["Blazer", "Air Force 1", "Jordan 4"]
    assert list(catalog.sort_products(df, "price-desc")["name"]) == ["Jordan 4", "Air Force 1", "Blazer"]
    assert list(catalog.sort_products(df, "name")["name"]) == ["Air Force 1", "Blazer", "Jordan 4"]
    assert list(catalog.sort_products(df, "featured")["name"]) == ["Air Force 1", "Jordan 4", "Blazer"]


def test_product_by_id():
    records = catalog.to_records(catalog.products_frame(API_PRODUCTS))
    assert catalog.product_by_id(records, 1)["name"] == "Jordan 4"
    assert catalog.product_by_id(records, "99") is None


def test_format_price_and_photo_url():
    assert catalog.format_price(1234) == "Ksh 1,234.00"
    assert catalog.photo_url("https://cdn.example.com/x.jpg") == "https://cdn.example.com/x.jpg"
    assert catalog.photo_url("x.jpg").endswith("/static/images/x.jpg")
    assert catalog.photo_url(None) is None
