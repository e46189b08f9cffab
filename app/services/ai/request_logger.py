import json
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from app.core.logging import default_log_dir

logger = logging.getLogger(__name__)


def get_ai_requests_directory(log_dir: Optional[Path] = None) -> Path:
    """Get or create the AI requests log directory."""
    base_dir = Path(log_dir) if log_dir is not None else default_log_dir()
    requests_dir = base_dir / "ai_requests"
    requests_dir.mkdir(parents=True, exist_ok=True)
    return requests_dir


def log_ai_request_response(
    operation: str,
    model_key: str,
    model_id: str,
    model_url: str,
    prompt: str,
    tasks: List[str],
    response_content: str,
    duration_seconds: float,
    parsing_success: bool,
    accepted_count: int,
    extracted_data: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    log_dir: Optional[Path] = None,
) -> Optional[Path]:
    """
    Write one model exchange to a JSON file under logs/ai_requests/.

    Args:
        operation: Type of operation (task_prioritization)
        model_key: Provider key (e.g., 'cohere')
        model_id: Model ID sent to the API
        model_url: Full URL of the API endpoint
        prompt: Prompt text sent to the model
        tasks: Task list the prompt was built from
        response_content: Raw text returned by the model
        duration_seconds: Time taken for the API call
        parsing_success: Whether a JSON payload was parsed from the text
        accepted_count: Assignments taken from the model before gap filling
        extracted_data: Normalized result body
        request_id: Request ID for tracing
        log_dir: Base logs directory (default: project logs/)

    Returns:
        Path to the created log file, or None if logging failed
    """
    try:
        requests_dir = get_ai_requests_directory(log_dir)

        timestamp = datetime.now()
        timestamp_str = timestamp.strftime("%Y-%m-%d_%H-%M-%S-%f")
        log_file = requests_dir / f"{timestamp_str}_{model_key}_{operation}.json"

        log_data = {
            "timestamp": timestamp.isoformat(),
            "request_id": request_id,
            "operation": operation,
            "model": {
                "key": model_key,
                "model_id": model_id,
                "url": model_url,
            },
            "request": {
                "tasks": tasks,
                "task_count": len(tasks),
                "prompt": prompt,
                "prompt_length": len(prompt),
            },
            "response": {
                "content": response_content,
                "content_length": len(response_content),
                "duration_seconds": duration_seconds,
            },
            "parsing": {
                "success": parsing_success,
                "accepted_count": accepted_count,
                "filled_count": len(tasks) - accepted_count,
                "extracted_data": extracted_data,
            }
        }

        with open(log_file, 'w', encoding='utf-8') as f:
            json.dump(log_data, f, indent=2, ensure_ascii=False)

        logger.info(f"AI request/response logged to: {log_file}")
        return log_file

    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error logging AI request/response: {str(e)}", exc_info=True)
        return None
