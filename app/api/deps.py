"""
Dependency injection for FastAPI endpoints.
Provides singleton instances and factory functions for services.
"""
import threading
from functools import lru_cache
from typing import Optional
from app.core.config import Settings, get_settings
from app.services.ai.cohere_client import CohereClient
from app.services.prioritization_service import PrioritizationService

# Global singleton instances
_cohere_client: Optional[CohereClient] = None
_client_lock = threading.Lock()


@lru_cache()
def get_app_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance
    """
    return get_settings()


def get_cohere_client() -> CohereClient:
    """
    Get Cohere client singleton.

    Returns:
        CohereClient instance
    """
    global _cohere_client
    with _client_lock:
        if _cohere_client is None:
            _cohere_client = CohereClient(get_app_settings())
        return _cohere_client


def get_prioritization_service() -> PrioritizationService:
    """
    Get a prioritization service bound to the shared client.

    Returns:
        PrioritizationService instance
    """
    return PrioritizationService(get_cohere_client(), get_app_settings())


def cleanup_resources() -> None:
    """Close the shared HTTP session on shutdown."""
    global _cohere_client
    with _client_lock:
        if _cohere_client is not None:
            _cohere_client.session.close()
            _cohere_client = None
