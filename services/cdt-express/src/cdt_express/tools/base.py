"""
Base class for all CDT Express tools.

Every tool declares its interface through ToolMetadata and implements
execute(). Callers go through run(), which never raises: whatever happens
ends in a ToolResponse, with failures flagged as errors.

Example:
    ```python
    from cdt_express.tools.base import BaseTool, ToolMetadata

    class EchoTool(BaseTool):
        def get_metadata(self) -> ToolMetadata:
            return ToolMetadata(
                name="echo",
                title="Echo",
                description="Returns its input",
                category="glossary",
                parameters={
                    "type": "object",
                    "properties": {"text": {"type": "string"}},
                    "required": ["text"],
                },
            )

        async def execute(self, text: str) -> str:
            return text
    ```
"""

import time
import uuid
from abc import ABC, abstractmethod
from typing import Any

import structlog
from common.logging import get_logger
from pydantic import BaseModel, ConfigDict, Field

from cdt_express.core.exceptions import CDTExpressError
from cdt_express.dispatch.envelope import (
    ToolResponse,
    error_response_from_exception,
    success_response,
)

logger = get_logger(__name__)


class ToolMetadata(BaseModel):
    """
    Metadata describing a tool's interface and purpose.

    Attributes:
        name: Unique identifier for the tool (snake_case)
        title: Short human readable title
        description: What the tool does
        category: Tool category for filtering
        parameters: JSON Schema object describing tool parameters
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique tool identifier")
    title: str | None = Field(default=None, description="Human readable title")
    description: str = Field(..., description="What the tool does")
    category: str = Field(..., description="Tool category")
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []},
        description="JSON Schema for parameters",
    )


class BaseTool(ABC):
    """
    Abstract base class for all tools.

    The base class handles:
    - Execution timing with perf_counter
    - A trace_id bound for the duration of the call, so HTTP requests
      made by the tool carry it as X-Request-ID
    - Conversion of every failure into an error envelope
    """

    def __init__(self) -> None:
        self.metadata = self.get_metadata()
        logger.debug("tool_initialized", tool_name=self.metadata.name, category=self.metadata.category)

    @abstractmethod
    def get_metadata(self) -> ToolMetadata:
        pass

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResponse | str:
        """
        Execute the tool.

        Returns:
            A ready ToolResponse, or plain text to wrap as a success

        Raises:
            Any exception (converted by run())
        """

    async def run(self, **kwargs: Any) -> ToolResponse:
        start_time = time.perf_counter()
        trace_id = structlog.contextvars.get_contextvars().get("trace_id") or str(uuid.uuid4())

        with structlog.contextvars.bound_contextvars(trace_id=trace_id, tool=self.metadata.name):
            logger.info(
                "tool_execution_start",
                category=self.metadata.category,
                arguments=sorted(kwargs),
            )
            try:
                result = await self.execute(**kwargs)
            except CDTExpressError as e:
                logger.warning(
                    "tool_execution_error",
                    error=e.message,
                    error_code=e.error_code,
                    duration_ms=_elapsed_ms(start_time),
                )
                return error_response_from_exception(e)
            except Exception as e:
                logger.error(
                    "tool_execution_error",
                    error=str(e),
                    error_type=type(e).__name__,
                    duration_ms=_elapsed_ms(start_time),
                    exc_info=True,
                )
                return error_response_from_exception(e)

            response = result if isinstance(result, ToolResponse) else success_response(result)
            logger.info(
                "tool_execution_success",
                duration_ms=_elapsed_ms(start_time),
                is_error=response.is_error,
                response_chars=len(response.text),
            )
            return response


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)
