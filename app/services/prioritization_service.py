"""
Task prioritization service.

Builds the prompt for a task list, calls the completion model once, and
normalizes whatever text comes back into a complete result. Each call is
independent: no caching, no shared state, no retries.
"""
import time
import logging
from typing import Any, List

from app.core.config import Settings
from app.core.exceptions import AIModelException, ConfigurationException, ValidationException
from app.core.logging import (
    get_request_id,
    log_event,
    log_operation_complete,
    log_operation_error,
    log_operation_start,
)
from app.models.domain import PrioritizationResult
from app.services.ai.cohere_client import CohereClient
from app.services.ai.prompt_builder import build_prompt
from app.services.ai.request_logger import log_ai_request_response
from app.services.ai.response_normalizer import normalize_detailed, result_summary

logger = logging.getLogger(__name__)

OPERATION = "task_prioritization"
MISSING_TASKS_MESSAGE = "tasks array is required"
BLANK_TASK_MESSAGE = "tasks must be non-empty strings"


def validate_task_list(tasks: Any) -> List[str]:
    """
    Check a caller-supplied task list.

    Raises:
        ValidationException: If tasks is missing, not a list, empty, or holds
            a non-string or blank entry
    """
    if not isinstance(tasks, (list, tuple)) or len(tasks) == 0:
        raise ValidationException(MISSING_TASKS_MESSAGE)
    if any(not isinstance(task, str) or not task.strip() for task in tasks):
        raise ValidationException(BLANK_TASK_MESSAGE)
    return list(tasks)


class PrioritizationService:
    """Prioritize task lists with a completion model."""

    def __init__(self, client: CohereClient, settings: Settings):
        self.client = client
        self.settings = settings

    def check_configuration(self) -> None:
        """
        Raises:
            ConfigurationException: If the provider API key is absent
        """
        if not self.settings.model_configured:
            raise ConfigurationException("COHERE_API_KEY")

    def prioritize(self, tasks: Any) -> PrioritizationResult:
        """
        Classify and order tasks by priority tier.

        Args:
            tasks: Ordered task descriptions

        Returns:
            PrioritizationResult with one assignment per task, sorted by tier then index

        Raises:
            ConfigurationException: Provider credential missing (checked first)
            ValidationException: Malformed or empty task list
            AIModelException: Model call failed
        """
        self.check_configuration()
        tasks = validate_task_list(tasks)
        task_count = len(tasks)

        log_operation_start(
            logger=__name__,
            function="prioritize",
            operation=OPERATION,
            message=f"Prioritizing {task_count} tasks",
            context={"task_count": task_count, "model": self.settings.cohere_model}
        )
        start_time = time.time()

        prompt = build_prompt(tasks)

        try:
            raw_text = self.client.generate(
                prompt,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
            )
        except AIModelException as e:
            log_operation_error(
                logger=__name__,
                function="prioritize",
                operation=OPERATION,
                error=e,
                message="Model call failed",
                context={"task_count": task_count}
            )
            raise

        model_duration = time.time() - start_time
        outcome = normalize_detailed(raw_text or "", task_count)

        if outcome.degraded:
            log_event(
                level="WARNING",
                logger=__name__,
                function="prioritize",
                operation=OPERATION,
                event="degraded_result",
                message="Model output incomplete; filled missing tasks with 'low'",
                context={
                    "task_count": task_count,
                    "accepted_count": outcome.accepted_count,
                    "extracted": outcome.extracted,
                    "parsed": outcome.parsed,
                    "raw_preview": (raw_text or "")[:500],
                }
            )

        if self.settings.log_ai_requests:
            log_ai_request_response(
                operation=OPERATION,
                model_key=self.client.service_key,
                model_id=self.settings.cohere_model,
                model_url=self.client.model_url,
                prompt=prompt,
                tasks=tasks,
                response_content=raw_text or "",
                duration_seconds=model_duration,
                parsing_success=outcome.parsed,
                accepted_count=outcome.accepted_count,
                extracted_data=outcome.result.to_dict(),
                request_id=get_request_id(),
                log_dir=self.settings.log_dir,
            )

        log_operation_complete(
            logger=__name__,
            function="prioritize",
            operation=OPERATION,
            context={"tiers": result_summary(outcome.result), "degraded": outcome.degraded},
            duration=time.time() - start_time
        )
        return outcome.result
