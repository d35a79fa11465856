"""Error taxonomy for the CDT Express tool service."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict


class CDTExpressError(Exception):
    """Base exception for the CDT Express service"""

    def __init__(self, message: str, error_code: str = "INTERNAL_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(CDTExpressError):
    """Raised when configuration is invalid (settings, schema/template mismatch)"""

    def __init__(self, message: str):
        super().__init__(message, error_code="CONFIGURATION_ERROR")


class ValidationIssue(BaseModel):
    """One field-level validation failure."""

    model_config = ConfigDict(frozen=True)

    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


class ValidationError(CDTExpressError):
    """Raised when tool input fails its field schema. Carries every issue found."""

    def __init__(self, issues: Sequence[ValidationIssue]):
        self.issues = tuple(issues)
        details = "; ".join(str(issue) for issue in self.issues)
        super().__init__(f"Validation Failed: {details}", error_code="VALIDATION_ERROR")


class HttpError(CDTExpressError):
    """Raised when the API answers with a non-2xx status"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API Error {status_code}: {body}", error_code="HTTP_ERROR")


class NetworkError(CDTExpressError):
    """Raised when no HTTP status could be obtained (DNS, connect, timeout)"""

    def __init__(self, message: str):
        super().__init__(f"Network Error: {message}", error_code="NETWORK_ERROR")


class PaginationLimitError(CDTExpressError):
    """Raised when an exhaustive walk needs more pages than the configured cap"""

    def __init__(self, max_pages: int):
        self.max_pages = max_pages
        super().__init__(
            f"Pagination Error: stopped after {max_pages} page(s) before the last page was "
            "reached; narrow the query or raise pagination.max_pages",
            error_code="PAGINATION_LIMIT",
        )


class ToolNotFoundError(CDTExpressError):
    """Raised when a tool name is not registered"""

    def __init__(self, message: str, tool_name: str):
        self.tool_name = tool_name
        super().__init__(message, error_code="TOOL_NOT_FOUND")
