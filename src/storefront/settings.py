"""Accessors for the ``[custom]`` section of ``domain.toml``.

Every setting falls back to a built-in default, so a deployment only needs to
list the values it changes.
"""

from protean.utils.globals import current_domain

_DEFAULTS = {
    "ORDER_NUMBER_PREFIX": "ORD",
    "ORDER_NUMBER_MAX_ATTEMPTS": 3,
    "PAYMENT_FAILURE_RATE": 0.1,
    "PAYMENT_MIN_LATENCY": 0.5,
    "PAYMENT_MAX_LATENCY": 1.0,
    "DEFAULT_PAGE_SIZE": 20,
    "MAX_PAGE_SIZE": 100,
    "DEFAULT_PRODUCT_STOCK": 10,
    "PLACEHOLDER_IMAGE": "/img/product-placeholder.png",
}


def setting(name: str):
    """Return a custom setting from the active domain, or its default."""
    custom = {}
    if current_domain:
        custom = current_domain.config.get("custom") or {}
    return custom.get(name, _DEFAULTS.get(name))


def order_number_prefix() -> str:
    return str(setting("ORDER_NUMBER_PREFIX"))


def order_number_max_attempts() -> int:
    return max(1, int(setting("ORDER_NUMBER_MAX_ATTEMPTS")))


def default_page_size() -> int:
    return int(setting("DEFAULT_PAGE_SIZE"))


def max_page_size() -> int:
    return int(setting("MAX_PAGE_SIZE"))


def default_product_stock() -> int:
    return int(setting("DEFAULT_PRODUCT_STOCK"))


def placeholder_image() -> str:
    return str(setting("PLACEHOLDER_IMAGE"))
