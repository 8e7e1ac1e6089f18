from __future__ import annotations

# Route table for the catalog admin backend. Routes are backend-owned; keep
# them here so call sites never build paths by hand.

ADMIN_LOGIN = "/admin/login"

ADMIN_LIST = "/admin"
ADMIN_CREATE = "/admin"
ADMIN_CHANGE_PASSWORD = "/admin/change-password"
ADMINS_ACTIVITY = "/admin/logs"
ADMINS_ME_PROFILE = "/admins/me/profile"
ADMINS_ME_PASSWORD = "/admins/me/password"

CATEGORIES = "/categories"
SUBCATEGORIES = "/subcategories"
PRODUCTS = "/products"
UNITS = "/units"
COUNTRIES = "/countries"
CAROUSEL = "/carousel"

DASHBOARD_SUMMARY = "/dashboard/summary"
SETTINGS_GENERAL = "/settings/general"
CURRENCY = "/currency"


def admin(admin_id: str) -> str:
    return f"{ADMIN_LIST}/{admin_id}"


def category(category_id: str) -> str:
    return f"{CATEGORIES}/{category_id}"


def subcategory(subcategory_id: str) -> str:
    return f"{SUBCATEGORIES}/{subcategory_id}"


def product(product_id: str) -> str:
    return f"{PRODUCTS}/{product_id}"


def products_by_category(category_id: str) -> str:
    return f"{PRODUCTS}/category/{category_id}"


def product_files(product_id: str) -> str:
    return f"{PRODUCTS}/{product_id}/files"


def product_file(product_id: str, file_id: str) -> str:
    return f"{PRODUCTS}/{product_id}/files/{file_id}"


def product_file_order(product_id: str) -> str:
    return f"{PRODUCTS}/{product_id}/files/order"


def unit(unit_id: str) -> str:
    return f"{UNITS}/{unit_id}"


def country(country_id: str) -> str:
    return f"{COUNTRIES}/{country_id}"


def carousel_item(item_id: str) -> str:
    return f"{CAROUSEL}/{item_id}"
