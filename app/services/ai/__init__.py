"""
AI services for the Task Prioritizer application.
Handles the model client, prompt building, and response normalization.
"""

# AI clients
from app.services.ai.base_client import BaseAIClient
from app.services.ai.cohere_client import CohereClient

# Prompt utilities
from app.services.ai.prompt_builder import PromptBuilder, build_prompt

# Response normalization
from app.services.ai.response_normalizer import (
    normalize,
    normalize_detailed,
    normalize_service_payload,
    parse_priority_response,
    assign_rank_tiers,
)

# Request logging
from app.services.ai.request_logger import log_ai_request_response

__all__ = [
    # AI clients
    "BaseAIClient",
    "CohereClient",

    # Prompt utilities
    "PromptBuilder",
    "build_prompt",

    # Response normalization
    "normalize",
    "normalize_detailed",
    "normalize_service_payload",
    "parse_priority_response",
    "assign_rank_tiers",

    # Request logging
    "log_ai_request_response",
]
