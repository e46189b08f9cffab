"""
Services layer for the Task Prioritizer application.
Contains business logic and orchestration for prioritization requests.
"""

from app.services.prioritization_service import (
    PrioritizationService,
    validate_task_list,
)

__all__ = [
    "PrioritizationService",
    "validate_task_list",
]
