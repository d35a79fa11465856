"""The uniform response shape every tool call ends in."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from cdt_express.core.exceptions import CDTExpressError


class TextContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """
    Terminal output of a tool call.

    Serializes as {"content": [{"type": "text", "text": ...}], "isError": bool}.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: tuple[TextContent, ...]
    is_error: bool = Field(default=False, alias="isError")

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)


def success_response(text: str) -> ToolResponse:
    return ToolResponse(content=(TextContent(text=text),))


def error_response(message: str) -> ToolResponse:
    return ToolResponse(content=(TextContent(text=message),), is_error=True)


def error_response_from_exception(exc: Exception) -> ToolResponse:
    """Known service errors carry their own message; anything else is prefixed with its type."""
    if isinstance(exc, CDTExpressError):
        return error_response(exc.message)
    return error_response(f"{type(exc).__name__}: {exc}")
