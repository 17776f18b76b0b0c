"""Product catalog helpers: API records -> pandas DataFrame -> card records."""
import pandas as pd

from shopease import config

COLUMNS = ["id", "name", "description", "price", "photo"]

API_FIELDS = {
    "product_id": "id",
    "product_name": "name",
    "product_description": "description",
    "product_cost": "price",
    "product_photo": "photo",
}

SORT_OPTIONS = [
    {"label": "Featured", "value": "featured"},
    {"label": "Price: low to high", "value": "price-asc"},
    {"label": "Price: high to low", "value": "price-desc"},
    {"label": "Name", "value": "name"},
]


def products_frame(records):
    df = pd.DataFrame(records or [])
    df = df.rename(columns=API_FIELDS)
    for col in COLUMNS:
        if col not in df.columns:
            df[col] = None
    df = df[COLUMNS].copy()

    df["price"] = pd.to_numeric(df["price"], errors="coerce")
    df["name"] = df["name"].fillna("").astype(str).str.strip()
    df["description"] = df["description"].fillna("").astype(str)
    df = df[(df["name"] != "") & df["price"].notna()]

    # products without an id are addressed by position
    missing = df["id"].isna()
    df["id"] = [_id_text(pos) if gap else _id_text(value)
                for pos, value, gap in zip(df.index, df["id"], missing)]
    return df.reset_index(drop=True)


def _id_text(value):
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def filter_products(df, query):
    query = (query or "").strip()
    if not query:
        return df
    mask = (df["name"].str.contains(query, case=False, regex=False)
            | df["description"].str.contains(query, case=False, regex=False))
    return df[mask]


def sort_products(df, order):
    if order == "price-asc":
        return df.sort_values("price", kind="stable")
    if order == "price-desc":
        return df.sort_values("price", ascending=False, kind="stable")
    if order == "name":
        return df.sort_values("name", key=lambda s: s.str.lower(), kind="stable")
    return df


def to_records(df):
    return df.to_dict("records")


def product_by_id(records, product_id):
    for product in records or []:
        if str(product.get("id")) == str(product_id):
            return product
    return None


def format_price(value):
    return f"{config.CURRENCY} {float(value):,.2f}"


def photo_url(photo):
    if not photo:
        return None
    if str(photo).startswith(("http://", "https://", "/")):
        return photo
    return config.PRODUCT_IMAGE_URL + str(photo)
