"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["WEBHOOK_URL"] = "https://workflow.test/webhook/ugc"
os.environ["WEBHOOK_SECRET"] = "test-secret"
os.environ["JOB_SERVICE_PROVIDER"] = "stub"
os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="ugc-engine-test-")


@pytest.fixture(scope="session")
def test_client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from ugc_engine.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def energy_drink_brief():
    """A detailed brief for an energy drink ad."""
    from ugc_engine.domain.enums import ModelId
    from ugc_engine.domain.models import AdBrief

    return AdBrief(
        product="Energy Drink",
        product_photo_url="https://cdn.example.com/energy-drink.png",
        target_audience="Gym-goers aged 25-40, fitness focused",
        product_features="sugar-free, natural caffeine, citrus taste",
        video_setting="Bright modern kitchen, morning light",
        model=ModelId.NANO_VEO,
    )


@pytest.fixture
def repository():
    """Progress repository backed by memory."""
    from ugc_engine.services.store import InMemoryStore, ProgressRepository

    return ProgressRepository(InMemoryStore())


@pytest.fixture
def stub_service():
    """Stub job service with a user and an admin password."""
    from ugc_engine.adapters.workflow.stub import StubJobService

    return StubJobService(password="letmein", admin_password="admin-pass", quota=2)
