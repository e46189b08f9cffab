"""
Cohere text-generation client.
"""
import logging
from typing import Any, Dict, Optional
import requests
from app.core.config import Settings
from app.core.logging import operation_logger
from app.services.ai.base_client import BaseAIClient

logger = logging.getLogger(__name__)


class CohereClient(BaseAIClient):
    """Client for the Cohere `generate` endpoint."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """
        Initialize Cohere client.

        Args:
            settings: Application settings
            session: Optional requests session
        """
        super().__init__(settings, "cohere", session=session)
        self.model_url = settings.get_model_url("generate")

    def _auth_headers(self) -> Dict[str, str]:
        api_key = self._require_credential(self.settings.cohere_api_key, "COHERE_API_KEY")
        return {"Authorization": f"Bearer {api_key}"}

    @operation_logger("model_generate")
    def generate(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        model_id: Optional[str] = None
    ) -> str:
        """
        Generate a completion for a prompt.

        Args:
            prompt: Prompt text
            max_tokens: Maximum tokens to generate (default: from settings)
            temperature: Sampling temperature (default: from settings)
            model_id: Model ID (default: from settings)

        Returns:
            Generated text, or an empty string if the provider returned none

        Raises:
            ConfigurationException: If no API key is configured
            AIModelException: If the provider call fails
        """
        payload = {
            "model": model_id or self.settings.cohere_model,
            "prompt": prompt,
            "max_tokens": self.settings.max_tokens if max_tokens is None else max_tokens,
            "temperature": self.settings.temperature if temperature is None else temperature,
        }

        self._log_request(payload, purpose="generate")

        response = self._make_request(self.model_url, payload)
        content = self._extract_text(response)

        if content:
            logger.info(f"Cohere response length: {len(content)} characters")
        else:
            logger.warning("Cohere returned empty content")

        return content

    def _extract_text(self, response: Dict[str, Any]) -> str:
        """Pull `generations[0].text` out of a generate response."""
        generations = response.get("generations") if isinstance(response, dict) else None
        if not isinstance(generations, list) or not generations:
            logger.warning("No generations in response")
            return ""
        first = generations[0]
        text = first.get("text") if isinstance(first, dict) else None
        return text if isinstance(text, str) else ""
