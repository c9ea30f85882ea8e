"""Test configuration and fixtures."""

import os
from datetime import datetime, timezone

import pytest

from quine.builder import build_artifacts
from quine.routes import create_app
from quine.state import RegistryState

PAYLOAD_SIZE = 4096


@pytest.fixture
def payload():
    """Arbitrary bytes standing in for the running executable."""
    return os.urandom(PAYLOAD_SIZE)


@pytest.fixture
def executable(tmp_path, payload):
    """Write the stand-in executable to disk and return its path."""
    path = tmp_path / "quine"
    path.write_bytes(payload)
    path.chmod(0o755)
    return path


@pytest.fixture
def created():
    return datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)


@pytest.fixture
def artifacts(executable, created):
    """Artifacts built from the stand-in executable."""
    return build_artifacts(str(executable), created=created)


@pytest.fixture
def state(artifacts):
    return RegistryState.from_artifacts(artifacts)


@pytest.fixture
def app(state):
    app = create_app(state)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client bound to the built registry state."""
    return app.test_client()
