"""Tests for the shared dependency providers."""
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from app.api import deps


@pytest.fixture(autouse=True)
def reset_client():
    deps.cleanup_resources()
    yield
    deps.cleanup_resources()


class TestCohereClientSingleton:

    def test_concurrent_first_calls_build_one_client(self):
        built = []
        start = threading.Barrier(8)

        def slow_client(settings):
            client = MagicMock()
            built.append(client)
            time.sleep(0.05)
            return client

        def first_call():
            start.wait()
            return deps.get_cohere_client()

        with patch("app.api.deps.CohereClient", side_effect=slow_client):
            with ThreadPoolExecutor(max_workers=8) as pool:
                clients = list(pool.map(lambda _: first_call(), range(8)))

        assert len(built) == 1
        assert all(client is built[0] for client in clients)

    def test_cleanup_closes_session_and_resets(self):
        with patch("app.api.deps.CohereClient") as client_class:
            first = deps.get_cohere_client()
            deps.cleanup_resources()
            second = deps.get_cohere_client()

        first.session.close.assert_called_once()
        assert client_class.call_count == 2
        assert second is client_class.return_value

    def test_service_uses_shared_client(self):
        with patch("app.api.deps.CohereClient") as client_class:
            service = deps.get_prioritization_service()

        assert service.client is client_class.return_value
