"""ShopEase storefront: product browsing, accounts and M-Pesa checkout on Dash."""

__version__ = "0.1.0"
