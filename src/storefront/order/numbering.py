"""Human-readable order numbers: ``ORD-<epoch ms>-<6 base-36 chars>``."""

import secrets
import string
import time

from storefront.domain import logger
from storefront.errors import OrderNumberConflict
from storefront.order.lookups import order_number_taken
from storefront.settings import order_number_max_attempts, order_number_prefix

_ALPHABET = string.digits + string.ascii_uppercase
_SUFFIX_LENGTH = 6


def generate_order_number(prefix="ORD"):
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{prefix}-{millis}-{suffix}"


def allocate_order_number(generate=generate_order_number):
    """Return an order number no existing order uses.

    Collisions are retried with a fresh number; after the configured number of
    attempts ``OrderNumberConflict`` is raised. The unique constraint on
    ``Order.order_number`` still guards the gap between check and insert.
    """
    attempts = order_number_max_attempts()
    for attempt in range(1, attempts + 1):
        candidate = generate(order_number_prefix())
        if not order_number_taken(candidate):
            return candidate
        logger.warning("order_number_collision", order_number=candidate, attempt=attempt)

    raise OrderNumberConflict(attempts)
