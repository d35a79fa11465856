"""Core module - exceptions and constants"""

from .constants import FormatMode, ToolCategory
from .exceptions import (
    CDTExpressError,
    ConfigurationError,
    HttpError,
    NetworkError,
    PaginationLimitError,
    ToolNotFoundError,
    ValidationError,
    ValidationIssue,
)

__all__ = [
    "CDTExpressError",
    "ConfigurationError",
    "HttpError",
    "NetworkError",
    "PaginationLimitError",
    "ToolNotFoundError",
    "ValidationError",
    "ValidationIssue",
    "FormatMode",
    "ToolCategory",
]
