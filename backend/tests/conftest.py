"""
conftest.py for backend/tests/

Puts backend/ on sys.path and wires GoRestClient to an in-memory upstream
(tests/fakes.py) through httpx.MockTransport, so no test touches the network
or needs a token.

Run from the project root:
    cd backend
    pytest tests -v
"""

import os
import sys

import httpx
import pytest

_backend_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _backend_dir not in sys.path:
    sys.path.insert(0, _backend_dir)

from api.dependencies import get_gorest_client  # noqa: E402
from api.main import app  # noqa: E402
from clients.gorest import GoRestClient  # noqa: E402
from core.retry import RetryPolicy  # noqa: E402
from tests.fakes import FakeUpstream, RecordingSleep  # noqa: E402

BASE_URL = "https://gorest.test/"
TOKEN = "test-token"


@pytest.fixture()
def upstream():
    return FakeUpstream()


@pytest.fixture()
def sleeps():
    return RecordingSleep()


@pytest.fixture()
def client(upstream, sleeps):
    return GoRestClient(
        BASE_URL,
        TOKEN,
        retry_policy=RetryPolicy(),
        transport=httpx.MockTransport(upstream),
        sleep=sleeps,
    )


@pytest.fixture()
def api(client):
    """TestClient for the proxy app with the GoRest client swapped for the fake."""
    from fastapi.testclient import TestClient

    app.dependency_overrides[get_gorest_client] = lambda: client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
