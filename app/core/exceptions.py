"""
Custom exception classes for the Task Prioritizer application.
These exceptions provide meaningful error messages and HTTP status codes.
"""


class TaskPrioritizerException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ConfigurationException(TaskPrioritizerException):
    """Raised when the model provider is not configured."""

    def __init__(self, setting: str):
        super().__init__(
            message=f"Cohere not configured (missing {setting})",
            status_code=500
        )
        self.setting = setting


class ValidationException(TaskPrioritizerException):
    """Raised when request data validation fails."""

    def __init__(self, message: str = "tasks array is required"):
        super().__init__(
            message=message,
            status_code=400  # Bad Request
        )


class AIModelException(TaskPrioritizerException):
    """Raised when AI model call fails."""

    def __init__(self, model: str, error: str):
        super().__init__(
            message=error or "AI service error",
            status_code=500
        )
        self.model = model
        self.error = error


class PrioritizeRequestError(TaskPrioritizerException):
    """Raised by the client when the prioritize API call fails."""

    def __init__(self, error: str, status_code: int = 502):
        super().__init__(
            message=f"API error: {error}",
            status_code=status_code
        )
        self.error = error
