"""
MCP surface of the service.

Each registry tool is exposed as a fastmcp Tool whose input schema is the
tool's own JSON Schema. Arguments reach the tool untouched: validation,
dispatch and error enveloping all happen in the tool, and an error envelope
is returned as a tool result flagged isError rather than a protocol error.
"""

from typing import Any

from common.logging import get_logger
from fastmcp import FastMCP
from fastmcp.tools import Tool, ToolResult
from pydantic import PrivateAttr

from cdt_express.config import Settings
from cdt_express.glossary import (
    GLOSSARY_DESCRIPTION,
    GLOSSARY_RESOURCE_NAME,
    GLOSSARY_TITLE,
    GLOSSARY_URI,
    METRIC_DEFINITIONS,
)
from cdt_express.tools.registry import ToolRegistry

logger = get_logger(__name__)

SERVER_NAME = "CDT Express MCP Server"


class RegistryTool(Tool):
    """fastmcp Tool that executes one registry entry by name."""

    _registry: ToolRegistry = PrivateAttr()

    @classmethod
    def from_registry(cls, registry: ToolRegistry, name: str) -> "RegistryTool":
        metadata = registry.get_tool(name).metadata
        mcp_tool = cls(
            name=metadata.name,
            title=metadata.title,
            description=metadata.description,
            parameters=metadata.parameters,
            tags={metadata.category},
        )
        mcp_tool._registry = registry
        return mcp_tool

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        response = await self._registry.execute_tool(self.name, arguments)
        # A plain string becomes exactly one text content block
        return ToolResult(content=response.text, is_error=response.is_error)


def create_mcp_server(registry: ToolRegistry, settings: Settings) -> FastMCP:
    """Build the FastMCP server exposing every registered tool and the glossary resource."""
    mcp = FastMCP(name=SERVER_NAME, version=settings.service.version)

    tool_names = registry.get_tool_names()
    for name in tool_names:
        mcp.add_tool(RegistryTool.from_registry(registry, name))

    @mcp.resource(
        GLOSSARY_URI,
        name=GLOSSARY_RESOURCE_NAME,
        title=GLOSSARY_TITLE,
        description=GLOSSARY_DESCRIPTION,
        mime_type="text/plain",
    )
    def metrics_glossary() -> str:
        return METRIC_DEFINITIONS

    logger.info("mcp_server_created", tools=tool_names, resources=[GLOSSARY_URI])
    return mcp
