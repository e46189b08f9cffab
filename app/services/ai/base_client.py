"""
Base AI client with common HTTP functionality for model clients.
"""
import time
import logging
import requests
from typing import Dict, Optional, Any
from app.core.config import Settings
from app.core.exceptions import AIModelException, ConfigurationException

logger = logging.getLogger(__name__)


class BaseAIClient:
    """Base class with common functionality for all AI clients."""

    def __init__(self, settings: Settings, service_key: str, session: Optional[requests.Session] = None):
        """
        Initialize base AI client.

        Args:
            settings: Application settings
            service_key: Service key used in logs and errors (e.g. "cohere")
            session: Optional requests session (a new one is created if omitted)
        """
        self.settings = settings
        self.service_key = service_key
        self.session = session or requests.Session()

    def _auth_headers(self) -> Dict[str, str]:
        """Headers carrying provider credentials. Subclasses override."""
        return {}

    def _make_request(
        self,
        url: str,
        payload: Dict[str, Any],
        timeout: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Make a single HTTP request to the AI model.

        Args:
            url: Endpoint URL
            payload: Request payload
            timeout: Request timeout in seconds (default: settings.request_timeout)

        Returns:
            Response dictionary

        Raises:
            AIModelException: If the request fails or the response is not JSON
        """
        if timeout is None:
            timeout = self.settings.request_timeout

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **self._auth_headers(),
        }

        try:
            start_time = time.time()
            logger.info(f"Calling {self.service_key} model")

            response = self.session.post(
                url,
                json=payload,
                headers=headers,
                timeout=timeout
            )

            duration = time.time() - start_time
            logger.info(
                f"{self.service_key} API response: "
                f"status={response.status_code}, duration={duration:.2f}s"
            )
        except requests.exceptions.Timeout:
            error_msg = f"Request timeout after {timeout}s"
            logger.error(f"{self.service_key} timeout: {error_msg}")
            raise AIModelException(model=self.service_key, error=error_msg)
        except requests.exceptions.ConnectionError as e:
            error_msg = f"Connection error: {str(e)}"
            logger.error(f"{self.service_key} connection error: {error_msg}")
            raise AIModelException(model=self.service_key, error=error_msg)
        except requests.exceptions.RequestException as e:
            error_msg = f"Request failed: {str(e)}"
            logger.error(f"{self.service_key} request error: {error_msg}")
            raise AIModelException(model=self.service_key, error=error_msg)

        if response.status_code != 200:
            error_msg = self._error_message(response)
            logger.error(f"{self.service_key} API error: {error_msg}")
            raise AIModelException(model=self.service_key, error=error_msg)

        try:
            return response.json()
        except ValueError as e:
            error_msg = f"Invalid JSON response: {str(e)}"
            logger.error(f"{self.service_key} response parse error: {error_msg}")
            raise AIModelException(model=self.service_key, error=error_msg)

    def _error_message(self, response: requests.Response) -> str:
        """Prefer the provider's own `message` field over the raw body."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP {response.status_code}: {response.text[:200]}"

    def _log_request(self, payload: Dict[str, Any], purpose: str = "call") -> None:
        """Log AI request for debugging."""
        logger.debug(
            f"{self.service_key} {purpose}: "
            f"prompt_length={len(payload.get('prompt', ''))}, "
            f"max_tokens={payload.get('max_tokens', 'N/A')}, "
            f"temperature={payload.get('temperature', 'N/A')}"
        )

    def _require_credential(self, value: Optional[str], setting: str) -> str:
        """Raise a configuration error before any call if a credential is missing."""
        if not value:
            raise ConfigurationException(setting)
        return value
