import json

import pytest

from userdata.policy import QueryOverridePolicy
from userdata.record import UserRecord
from userdata.storage import SessionStore


class BrokenBackend(dict):
    """Session mapping that fails on every access."""

    def get(self, key, default=None):
        raise OSError("session backend down")

    def __setitem__(self, key, value):
        raise OSError("session backend down")

    def pop(self, key, default=None):
        raise OSError("session backend down")


@pytest.fixture
def backend():
    return {}


@pytest.fixture
def store(backend):
    return SessionStore(backend)


@pytest.fixture
def broken_store():
    return SessionStore(BrokenBackend())


@pytest.fixture
def maria():
    return UserRecord(name="Maria Souza", tax_id="12345678901", full_name="Maria Aparecida Souza")


@pytest.fixture
def stored(backend):
    """Put a record straight into the backing mapping, bypassing the adapter."""
    def _put(data):
        backend["userData"] = json.dumps(data)
        return data
    return _put


@pytest.fixture
def app():
    from app import app as flask_app
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.config["USER_DATA_QUERY_POLICY"] = QueryOverridePolicy.REPLACE


@pytest.fixture
def client(app):
    return app.test_client()
