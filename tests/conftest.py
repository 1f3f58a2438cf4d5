"""Shared fixtures for charity board tests."""

import sys
from pathlib import Path

import pytest

# Ensure the repo root is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from charityboard.config import Config
from charityboard.schema import Portal
from charityboard.workspace import Workspace


@pytest.fixture(autouse=True)
def no_ai_key(monkeypatch):
    """Keep the real environment's API key out of every test."""
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("CHARITYBOARD_CONFIG", raising=False)


@pytest.fixture
def workspace():
    ws = Workspace(Config()).open()
    yield ws
    ws.close()


@pytest.fixture
def store(workspace):
    return workspace.store


@pytest.fixture
def manager_ws(workspace):
    assert workspace.login("ber", "123", Portal.CHARITY)
    return workspace


@pytest.fixture
def employee_ws(workspace):
    assert workspace.login("emp1", "123", Portal.CHARITY)
    return workspace


@pytest.fixture
def admin_ws(workspace):
    assert workspace.login("admin", "123", Portal.ADMIN)
    return workspace


@pytest.fixture
def app():
    from board_server import create_app
    app = create_app(Config())
    app.testing = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
