"""Tests for the Cohere generate client."""
from unittest.mock import MagicMock

import pytest
import requests

from app.core.exceptions import AIModelException, ConfigurationException
from app.services.ai.cohere_client import CohereClient


def make_response(status_code=200, body=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(settings, session):
    return CohereClient(settings, session=session)


class TestGenerate:

    def test_posts_to_generate_endpoint(self, client, session, settings):
        session.post.return_value = make_response(body={"generations": [{"text": "hello"}]})

        assert client.generate("the prompt") == "hello"

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.cohere.ai/v1/generate"
        assert kwargs["json"] == {
            "model": "command-light",
            "prompt": "the prompt",
            "max_tokens": 200,
            "temperature": 0.0,
        }
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert kwargs["timeout"] == settings.request_timeout

    def test_explicit_parameters_override_settings(self, client, session):
        session.post.return_value = make_response(body={"generations": [{"text": "x"}]})

        client.generate("p", max_tokens=50, temperature=0.3, model_id="command")

        payload = session.post.call_args.kwargs["json"]
        assert payload["max_tokens"] == 50
        assert payload["temperature"] == 0.3
        assert payload["model"] == "command"

    def test_custom_api_url(self, tmp_path, session):
        from app.core.config import Settings

        settings = Settings(
            _env_file=None,
            cohere_api_key="k",
            cohere_api_url="http://proxy.local/v1/",
            log_dir=tmp_path,
        )
        assert CohereClient(settings, session=session).model_url == "http://proxy.local/v1/generate"

    @pytest.mark.parametrize("body", [
        {},
        {"generations": []},
        {"generations": [{}]},
        {"generations": [{"text": None}]},
        {"generations": "nope"},
    ])
    def test_missing_text_is_empty(self, client, session, body):
        session.post.return_value = make_response(body=body)
        assert client.generate("p") == ""

    def test_missing_key_raises_before_calling(self, unconfigured_settings, session):
        client = CohereClient(unconfigured_settings, session=session)

        with pytest.raises(ConfigurationException) as exc_info:
            client.generate("p")

        assert exc_info.value.message == "Cohere not configured (missing COHERE_API_KEY)"
        session.post.assert_not_called()


class TestErrors:

    def test_provider_message_is_surfaced(self, client, session):
        session.post.return_value = make_response(
            status_code=401, body={"message": "invalid api token"}, text='{"message": "invalid api token"}'
        )

        with pytest.raises(AIModelException) as exc_info:
            client.generate("p")

        assert exc_info.value.message == "invalid api token"
        assert exc_info.value.status_code == 500

    def test_non_json_error_body(self, client, session):
        session.post.return_value = make_response(
            status_code=503, body=ValueError("no json"), text="Service Unavailable"
        )

        with pytest.raises(AIModelException) as exc_info:
            client.generate("p")

        assert exc_info.value.message == "HTTP 503: Service Unavailable"

    def test_invalid_json_success_body(self, client, session):
        session.post.return_value = make_response(body=ValueError("bad"))

        with pytest.raises(AIModelException) as exc_info:
            client.generate("p")

        assert exc_info.value.message.startswith("Invalid JSON response")

    @pytest.mark.parametrize("error,prefix", [
        (requests.exceptions.Timeout("slow"), "Request timeout after 60s"),
        (requests.exceptions.ConnectionError("refused"), "Connection error"),
        (requests.exceptions.RequestException("boom"), "Request failed"),
    ])
    def test_transport_errors(self, client, session, error, prefix):
        session.post.side_effect = error

        with pytest.raises(AIModelException) as exc_info:
            client.generate("p")

        assert exc_info.value.message.startswith(prefix)
        assert exc_info.value.model == "cohere"

    def test_single_attempt(self, client, session):
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(AIModelException):
            client.generate("p")

        assert session.post.call_count == 1
