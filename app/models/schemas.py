"""
Pydantic models for API request/response validation.
"""
from pydantic import BaseModel
from typing import List, Literal

from app.models.domain import PrioritizationResult


# Response Models

class PriorityItem(BaseModel):
    """One prioritized task index."""
    index: int
    priority: Literal["urgent", "important", "low"]


class PrioritizeResponse(BaseModel):
    """Response model for a prioritization result."""
    items: List[PriorityItem]

    @classmethod
    def from_result(cls, result: PrioritizationResult) -> "PrioritizeResponse":
        return cls(**result.to_dict())


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    model_configured: bool
