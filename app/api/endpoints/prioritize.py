"""
Task prioritization API endpoint.
"""
import asyncio
import json
import logging
from fastapi import APIRouter, Depends, Request

from app.api.deps import get_prioritization_service
from app.core.exceptions import ValidationException
from app.models.schemas import ErrorResponse, PrioritizeResponse
from app.services.prioritization_service import MISSING_TASKS_MESSAGE, PrioritizationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/prioritize",
    response_model=PrioritizeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def prioritize_tasks(
    request: Request,
    service: PrioritizationService = Depends(get_prioritization_service),
):
    """
    Classify tasks as urgent/important/low and return them in priority order.

    The body is read directly so that a malformed or missing body is reported
    as the same 400 as an empty task list.

    Returns:
        `{"items": [{"index": int, "priority": str}, ...]}`, one item per task

    Raises:
        ConfigurationException (500): COHERE_API_KEY is not set
        ValidationException (400): `tasks` missing, not a list, or empty
        AIModelException (500): Model call failed
    """
    service.check_configuration()

    body = await request.body()
    try:
        payload = json.loads(body) if body else {}
    except (ValueError, RecursionError):
        raise ValidationException(MISSING_TASKS_MESSAGE)

    tasks = payload.get("tasks") if isinstance(payload, dict) else None

    # Model call is blocking; keep it off the event loop
    result = await asyncio.to_thread(service.prioritize, tasks)

    logger.info(f"Prioritized {len(result)} tasks")
    return PrioritizeResponse.from_result(result)
