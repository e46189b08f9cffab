"""
Structured logging for the prioritizer service.

Every record is written twice: once as a JSON document for machines and
once as an indented text block for people. Request and operation identifiers
travel in context variables so that log lines emitted deep inside a model
call still carry the HTTP request they belong to.
"""

import json
import logging
import logging.handlers
import uuid
import functools
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

_request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
_operation: ContextVar[Optional[str]] = ContextVar('operation', default=None)

JSON_LOG_FILENAME = "application.log.json"
TEXT_LOG_FILENAME = "application.log"
LOG_RETENTION_DAYS = 30

# Context values longer than this are cut in the human-readable log
MAX_CONTEXT_VALUE_LENGTH = 500


def default_log_dir() -> Path:
    """Project-level logs directory (next to the app package)."""
    return Path(__file__).resolve().parent.parent.parent / "logs"


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Tracing fields shared by both formatters, in display order."""
    fields = {
        "request_id": _request_id.get(),
        "operation": _operation.get(),
        "event": getattr(record, 'event', None),
    }
    return {key: value for key, value in fields.items() if value}


def _exception_parts(record: logging.LogRecord) -> Optional[Tuple[str, str, List[str]]]:
    if not record.exc_info:
        return None
    exc_type, exc_value, exc_tb = record.exc_info
    return (
        exc_type.__name__ if exc_type else "Unknown",
        str(exc_value) if exc_value else "N/A",
        traceback.format_exception(exc_type, exc_value, exc_tb),
    )


class StructuredJSONFormatter(logging.Formatter):
    """One JSON document per record."""

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": getattr(record, 'function_name', record.funcName),
            "line": record.lineno,
            **_record_fields(record),
            "message": record.getMessage(),
        }

        context = getattr(record, 'context', None)
        if context:
            document["context"] = context

        exception = _exception_parts(record)
        if exception:
            exc_type, exc_message, exc_traceback = exception
            document["exception"] = {
                "type": exc_type,
                "message": exc_message,
                "traceback": exc_traceback,
            }

        return json.dumps(document, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Header line followed by indented `key: value` lines."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        function = getattr(record, 'function_name', record.funcName)
        lines = [
            f"{timestamp} {record.levelname:8s} [{record.name}] {function}() - {record.getMessage()}"
        ]
        lines.extend(f"  {key}: {value}" for key, value in _record_fields(record).items())

        context = getattr(record, 'context', None)
        if isinstance(context, dict):
            for key, value in context.items():
                lines.extend(self._format_context_value(key, value))
        elif context:
            lines.append(f"  context: {context}")

        exception = _exception_parts(record)
        if exception:
            exc_type, exc_message, exc_traceback = exception
            lines.append(f"  exception_type: {exc_type}")
            lines.append(f"  exception_message: {exc_message}")
            lines.append("  traceback:")
            for chunk in exc_traceback:
                lines.extend(f"    {line}" for line in chunk.rstrip().split('\n'))

        return '\n'.join(lines)

    @staticmethod
    def _format_context_value(key: str, value: Any) -> List[str]:
        if isinstance(value, (dict, list)):
            rendered = json.dumps(value, indent=2, ensure_ascii=False, default=str)
            return [f"  {key}:"] + ['    ' + line for line in rendered.split('\n')]
        text = str(value)
        if len(text) > MAX_CONTEXT_VALUE_LENGTH:
            text = text[:MAX_CONTEXT_VALUE_LENGTH] + "... (truncated)"
        return [f"  {key}: {text}"]


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when='midnight',
        interval=1,
        backupCount=LOG_RETENTION_DAYS,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """
    Route the root logger to the JSON and text log files.

    Safe to call more than once; existing root handlers are replaced.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files. If None, uses <project>/logs/
    """
    log_dir = Path(log_dir) if log_dir is not None else default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, log_level.upper())
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    json_log_file = log_dir / JSON_LOG_FILENAME
    text_log_file = log_dir / TEXT_LOG_FILENAME
    root_logger.addHandler(_rotating_handler(json_log_file, level, StructuredJSONFormatter()))
    root_logger.addHandler(_rotating_handler(text_log_file, level, HumanReadableFormatter()))

    log_event(
        level="INFO",
        logger=__name__,
        function="setup_logging",
        operation="logging_setup",
        event="logging_initialized",
        message="Logging system initialized",
        context={
            "log_level": log_level,
            "json_log_file": str(json_log_file),
            "text_log_file": str(text_log_file),
        }
    )


def get_request_id() -> Optional[str]:
    return _request_id.get()


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def generate_request_id() -> str:
    """New `req_<12 hex>` identifier for a request without an X-Request-ID header."""
    return f"req_{uuid.uuid4().hex[:12]}"


def log_event(
    level: str,
    logger: str,
    function: str,
    operation: Optional[str] = None,
    event: Optional[str] = None,
    message: str = "",
    context: Optional[Dict[str, Any]] = None,
    exc_info: Optional[BaseException] = None
) -> None:
    """
    Log a structured event.

    `operation` is set for this record only; the surrounding operation
    context is restored afterwards.

    Args:
        level: Log level name
        logger: Logger name (usually module path)
        function: Function the event describes
        operation: High-level operation name (e.g. task_prioritization)
        event: Event type (e.g. operation_start, degraded_result)
        message: Human-readable message
        context: Event-specific data
        exc_info: Exception to attach
    """
    logger_instance = logging.getLogger(logger)
    log_method = getattr(logger_instance, level.lower(), logger_instance.info)

    extra: Dict[str, Any] = {"function_name": function}
    if event:
        extra['event'] = event
    if context:
        extra['context'] = context

    token = _operation.set(operation) if operation else None
    try:
        log_method(message, extra=extra, exc_info=exc_info)
    finally:
        if token is not None:
            _operation.reset(token)


def _log_operation_event(
    level: str,
    event: str,
    logger: str,
    function: str,
    operation: str,
    message: str,
    context: Optional[Dict[str, Any]],
    exc_info: Optional[BaseException] = None
) -> None:
    log_event(
        level=level,
        logger=logger,
        function=function,
        operation=operation,
        event=event,
        message=message,
        context=context,
        exc_info=exc_info
    )


def log_operation_start(
    logger: str,
    function: str,
    operation: str,
    message: str = "",
    context: Optional[Dict[str, Any]] = None
) -> None:
    _log_operation_event(
        "INFO", "operation_start", logger, function, operation,
        message or f"Starting {operation}", context
    )


def log_operation_complete(
    logger: str,
    function: str,
    operation: str,
    message: str = "",
    context: Optional[Dict[str, Any]] = None,
    duration: Optional[float] = None
) -> None:
    context = dict(context or {})
    if duration is not None:
        context["duration_seconds"] = round(duration, 3)
    _log_operation_event(
        "INFO", "operation_complete", logger, function, operation,
        message or f"Completed {operation}", context
    )


def log_operation_error(
    logger: str,
    function: str,
    operation: str,
    error: BaseException,
    message: str = "",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """Log a failed operation with the error type, message and traceback."""
    context = dict(context or {})
    context["error_type"] = type(error).__name__
    context["error_message"] = str(error)
    _log_operation_event(
        "ERROR", "operation_error", logger, function, operation,
        message or f"Error in {operation}", context, exc_info=error
    )


def operation_logger(operation_name: str):
    """
    Decorator that logs start, completion and failure of the wrapped call.

    Only keyword arguments are logged (truncated), so prompts passed
    positionally stay out of the log.

    Usage:
        @operation_logger("model_generate")
        def generate(self, prompt, max_tokens=None):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger_name = func.__module__
            function_name = func.__name__
            logged_kwargs = {k: str(v)[:200] for k, v in kwargs.items()}

            log_operation_start(
                logger=logger_name,
                function=function_name,
                operation=operation_name,
                context={"kwargs": logged_kwargs} if logged_kwargs else None
            )

            start_time = datetime.now(timezone.utc)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log_operation_error(
                    logger=logger_name,
                    function=function_name,
                    operation=operation_name,
                    error=e,
                    context={"duration_seconds": (datetime.now(timezone.utc) - start_time).total_seconds()}
                )
                raise

            log_operation_complete(
                logger=logger_name,
                function=function_name,
                operation=operation_name,
                context={"result_type": type(result).__name__},
                duration=(datetime.now(timezone.utc) - start_time).total_seconds()
            )
            return result

        return wrapper
    return decorator
