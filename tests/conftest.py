"""Shared fixtures for the task prioritizer tests."""
import os
import tempfile
from unittest.mock import MagicMock

import pytest

# Keep application logs out of the project tree while testing
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="task-prioritizer-logs-"))

from app.core.config import Settings
from app.services.ai.cohere_client import CohereClient
from app.services.prioritization_service import PrioritizationService


TASKS = [
    "Research new project ideas",
    "Plan team meeting for next week",
    "Fix critical bug in production",
]

MODEL_OUTPUT = (
    '{"items":[{"index":3,"priority":"urgent"},'
    '{"index":2,"priority":"important"},'
    '{"index":1,"priority":"low"}]}'
)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with a provider key and logs under tmp_path."""
    return Settings(
        _env_file=None,
        cohere_api_key="test-key",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def unconfigured_settings(tmp_path) -> Settings:
    """Settings without a provider key."""
    return Settings(
        _env_file=None,
        cohere_api_key=None,
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def mock_client(settings) -> MagicMock:
    """A CohereClient stand-in returning the worked-example output."""
    client = MagicMock(spec=CohereClient)
    client.service_key = "cohere"
    client.model_url = settings.get_model_url("generate")
    client.generate.return_value = MODEL_OUTPUT
    return client


@pytest.fixture
def service(mock_client, settings) -> PrioritizationService:
    return PrioritizationService(mock_client, settings)
