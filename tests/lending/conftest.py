import os

import pytest


@pytest.fixture(scope="session")
def _lending_domain(request):
    """Initialize the lending domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from lending.domain import lending

    lending.init()
    return lending


@pytest.fixture(scope="session", autouse=True)
def setup_db(_lending_domain):
    from lending.utils.db import drop_db, setup_db

    setup_db(_lending_domain)

    yield

    drop_db(_lending_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_lending_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _lending_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def stock():
    """Register `count` in-stock items of an equipment type, return their ids."""
    from protean import current_domain

    from lending.item.item import Item

    def _stock(equipment_id, count):
        repo = current_domain.repository_for(Item)
        ids = []
        for n in range(count):
            item = Item.register(equipment_id=equipment_id, serial_number=f"{equipment_id}-{n + 1}")
            repo.add(item)
            ids.append(str(item.id))
        return ids

    return _stock
