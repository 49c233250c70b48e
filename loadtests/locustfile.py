"""Storefront Load Testing - Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.catalogue import CatalogueAdminUser  # noqa: F401
from loadtests.scenarios.mixed import MixedWorkloadUser  # noqa: F401
from loadtests.scenarios.shopping import ShopperUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400 and response.status_code != 402:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Seed a small catalogue so shoppers have something to buy."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    if not environment.host:
        return

    try:
        resp = requests.get(f"{environment.host}/products", params={"limit": 1}, timeout=5)
        if resp.ok and resp.json()["pagination"]["total"] == 0:
            from loadtests.data_generators import product_data

            for _ in range(25):
                requests.post(f"{environment.host}/admin/products", json=product_data(), timeout=5)
            print("[LOADTEST] Seeded 25 products")
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not seed catalogue: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print headline dashboard figures when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    if not environment.host:
        return
    try:
        figures = requests.get(f"{environment.host}/admin/dashboard", timeout=5).json()
        print(f"[LOADTEST] Orders: {figures['total_orders']}  Revenue: {figures['total_revenue']}")
    except (requests.RequestException, ValueError, KeyError) as e:
        print(f"[LOADTEST] Could not fetch dashboard: {e}")
    print()
