"""
Request dispatch machinery: template resolution, query encoding,
pagination, formatting and the response envelope.
"""

from cdt_express.dispatch.envelope import (
    ToolResponse,
    error_response,
    error_response_from_exception,
    success_response,
)
from cdt_express.dispatch.formatting import format_csv, format_json, format_result
from cdt_express.dispatch.pagination import (
    PageEnvelope,
    PageFetcher,
    PaginationInfo,
    PaginationWalker,
    WalkResult,
)
from cdt_express.dispatch.query import encode_query
from cdt_express.dispatch.template import ResolvedRequest, UrlTemplate

__all__ = [
    "PageEnvelope",
    "PageFetcher",
    "PaginationInfo",
    "PaginationWalker",
    "ResolvedRequest",
    "ToolResponse",
    "UrlTemplate",
    "WalkResult",
    "encode_query",
    "error_response",
    "error_response_from_exception",
    "format_csv",
    "format_json",
    "format_result",
    "success_response",
]
