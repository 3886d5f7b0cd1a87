"""Pytest plugin providing session-store fixtures and journal capture on failure."""

import json
import logging
from datetime import datetime
from pathlib import Path

import pytest

from ..api.client import ApiClient
from ..backend.store import SessionStore
from ..config import Config
from ..models import CheckoutInfo
from ..testdata import generate_test_data

logger = logging.getLogger(__name__)

STORE_FIXTURES = ["authed_store", "store", "api_client"]


@pytest.fixture
def saucecart_config() -> Config:
    """Default configuration; override this fixture to customize stores."""
    return Config()


@pytest.fixture
def store(saucecart_config: Config) -> SessionStore:
    """A fresh, anonymous session store."""
    return SessionStore(saucecart_config)


@pytest.fixture
def authed_store(store: SessionStore) -> SessionStore:
    """A session store already logged in as the standard user."""
    auth = store.config.auth
    response = store.login(auth.valid_username, auth.valid_password).raise_for_status()
    store.set_token(response.json()["token"])
    return store


@pytest.fixture
def checkout_info() -> CheckoutInfo:
    """Shipping details for a throwaway shopper."""
    return generate_test_data().checkout_info()


@pytest.fixture
def api_client(store: SessionStore) -> ApiClient:
    """Async client bound to the test's store."""
    return ApiClient(store)


def pytest_runtest_makereport(item, call):
    """Hook to execute after each test phase."""
    if call.when == "call" and call.excinfo is not None:
        _capture_journal(item)


def _find_store(item) -> SessionStore | None:
    """Find the session store used by a test, if any."""
    funcargs = getattr(item, "funcargs", {})
    for name in STORE_FIXTURES:
        value = funcargs.get(name)
        if isinstance(value, SessionStore):
            return value
        if isinstance(value, ApiClient) and value.store is not None:
            return value.store
    return None


def _capture_journal(item) -> Path | None:
    """Write the request journal of a failing test next to its file."""
    store = _find_store(item)
    if store is None or not store.journal:
        return None

    failure_dir = Path(item.path).parent / "failures"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    clean_name = item.name.replace("::", "_").replace("/", "_")
    filename = failure_dir / f"{clean_name}_{timestamp}.json"

    payload = {
        "test": item.nodeid,
        "session": store.session_id,
        "state": store.session.state.value,
        "cart": list(store.cart),
        "journal": [entry.to_dict() for entry in store.journal],
    }

    try:
        failure_dir.mkdir(exist_ok=True)
        filename.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not write request journal for %s: %s", item.nodeid, e)
        return None

    item.user_properties.append(("journal_path", str(filename)))
    return filename
