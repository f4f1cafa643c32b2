"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when request parameters fail validation."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ConfigurationError(AppError):
    """
    Raised when required configuration (credentials) is missing.

    The only error allowed to escape the service boundary.
    """

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")


class UpstreamError(AppError):
    """Raised when an upstream API is unreachable or answers with an error status."""

    def __init__(self, source: str, detail: str, code: str = "UPSTREAM_ERROR"):
        self.source = source
        super().__init__(f"{source}: {detail}", code=code)


class MalformedPayloadError(UpstreamError):
    """Raised when an upstream payload lacks expected fields."""

    def __init__(self, source: str, detail: str):
        super().__init__(source, detail, code="MALFORMED_PAYLOAD")
