from typing import Optional


class AIServiceError(Exception):
    """Base class for every failure of a request to the completion endpoint."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotConfiguredError(AIServiceError):
    """No API credential is configured; the request never reached the network."""

    def __init__(self, message: str = "AI Service is not configured. Please add your API key in Settings."):
        super().__init__(message)


class CompletionAPIError(AIServiceError):
    """The completion endpoint answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(AIServiceError):
    """The endpoint answered successfully but the content is not usable."""
