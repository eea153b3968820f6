"""
Application errors for clean API error handling.

Each error carries the user-facing message (Vietnamese) and the HTTP status the
API should answer with. Handlers in app.main render them as {"error": message}.
"""


class AppError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Raised when required input (question, title, content, image payload) is missing or invalid."""

    status_code = 400


class ConfigurationError(AppError):
    """Raised when the generation provider is not configured."""

    status_code = 500


class UpstreamError(AppError):
    """Raised when the generation call or a store operation fails. Message stays generic."""

    status_code = 500

    def __init__(self, message: str = "Không thể xử lý yêu cầu. Vui lòng thử lại.") -> None:
        super().__init__(message)
