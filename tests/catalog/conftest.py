import os

import pytest


@pytest.fixture(scope="session")
def _catalog_domain(request):
    """Initialize the catalog domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from catalog.domain import catalog

    catalog.init()
    return catalog


@pytest.fixture(autouse=True)
def run_around_tests(_catalog_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _catalog_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
