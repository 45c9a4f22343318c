"""
Collection names and document paths (schema-in-code).

The store has no DDL. Collections appear when the first document is written.
Use these helpers so every handler agrees on where things live.
"""

USERS = "users"
ORDERS = "orders"
PRODUCTS = "products"
NOTIFICATIONS = "notifications"
ANALYTICS = "analytics"

# Record-creation trigger patterns
USER_DOCUMENT = "users/{userId}"
ORDER_DOCUMENT = "orders/{orderId}"


def user_path(user_id: str) -> str:
    return f"{USERS}/{user_id}"


def user_preferences_path(user_id: str) -> str:
    return f"{USERS}/{user_id}/preferences/settings"


def cart_metadata_path(user_id: str) -> str:
    return f"{USERS}/{user_id}/cart/metadata"


def order_path(order_id: str) -> str:
    return f"{ORDERS}/{order_id}"


def product_path(product_id: str) -> str:
    return f"{PRODUCTS}/{product_id}"
