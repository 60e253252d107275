"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from slack_keeper.app import app


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app (lifespan not started)."""
    return TestClient(app)
