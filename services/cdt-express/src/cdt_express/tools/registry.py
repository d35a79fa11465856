"""
Tool registry.

Central place where every tool is registered at startup and looked up by
name afterwards, by the MCP server and by tests alike.

Example:
    ```python
    registry = ToolRegistry()
    registry.register(MetricsDefinitionTool())

    response = await registry.execute_tool("get_metrics_definition", {})
    ```
"""

from collections.abc import Mapping
from typing import Any

from common.logging import get_logger

from cdt_express.core.exceptions import ToolNotFoundError
from cdt_express.dispatch.envelope import ToolResponse
from cdt_express.tools.base import BaseTool

logger = get_logger(__name__)


class ToolRegistry:
    """
    Registry of tools keyed by name, in registration order.

    Registration happens once at startup; afterwards the registry is only
    read, so concurrent lookups need no locking.
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def register(self, tool: BaseTool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        tool_name = tool.metadata.name
        if tool_name in self._tools:
            raise ValueError(
                f"Tool '{tool_name}' already registered. Each tool must have a unique name."
            )
        self._tools[tool_name] = tool
        logger.debug("tool_registered", tool=tool_name, category=tool.metadata.category)

    def get_tool(self, name: str) -> BaseTool:
        """
        Raises:
            ToolNotFoundError: If no tool has that name
        """
        if name not in self._tools:
            available_tools = ", ".join(self._tools)
            raise ToolNotFoundError(
                f"Tool '{name}' not found in registry. Available tools: {available_tools}",
                tool_name=name,
            )
        return self._tools[name]

    def list_tools(self, category: str | None = None) -> list[BaseTool]:
        tools = list(self._tools.values())
        if category:
            tools = [t for t in tools if t.metadata.category == category]
        return tools

    def get_tool_names(self, category: str | None = None) -> list[str]:
        return [t.metadata.name for t in self.list_tools(category=category)]

    def get_registry_stats(self) -> dict[str, Any]:
        by_category: dict[str, int] = {}
        for tool in self._tools.values():
            by_category[tool.metadata.category] = by_category.get(tool.metadata.category, 0) + 1
        return {"total_tools": len(self._tools), "by_category": by_category}

    async def execute_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        """
        Execute a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name (lookup happens
                before the tool's own error handling)
        """
        tool = self.get_tool(name)
        return await tool.run(**dict(arguments or {}))
