"""Lending Load Testing — Locust entry point.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Independent allocation journeys only:
    locust -f loadtests/locustfile.py LendingUser

    # Administrators racing for one scarce stock:
    locust -f loadtests/locustfile.py ContendedApprovalUser --headless \
           -u 50 -r 10 -t 120s --csv=results/contention
"""

import logging
import time

import requests
from locust import events

from loadtests.data_generators import item_data
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.lending import (  # noqa: F401
    SHARED_EQUIPMENT_ID,
    SHARED_STOCK,
    ContendedApprovalUser,
    LendingUser,
)

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Register the shared item pool the contended scenario fights over."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")

    environment.shared_item_ids = []
    if not environment.host:
        return

    for _ in range(SHARED_STOCK):
        try:
            resp = requests.post(f"{environment.host}/items", json=item_data(SHARED_EQUIPMENT_ID), timeout=5)
        except requests.RequestException as exc:
            print(f"[LOADTEST] Could not register shared items: {exc}")
            return
        if resp.status_code == 201:
            environment.shared_item_ids.append(resp.json()["item_id"])

    print(f"[LOADTEST] Shared pool: {len(environment.shared_item_ids)} items of {SHARED_EQUIPMENT_ID}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
