"""
Tools exposed by the CDT Express service.

- EndpointTool: generic proxy for one API endpoint
- MetricsDefinitionTool: static metrics glossary
"""

from cdt_express.tools.base import BaseTool, ToolMetadata
from cdt_express.tools.endpoint_tool import EndpointDefinition, EndpointTool
from cdt_express.tools.endpoints import ENDPOINTS, build_tool_registry
from cdt_express.tools.glossary_tool import MetricsDefinitionTool
from cdt_express.tools.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ENDPOINTS",
    "EndpointDefinition",
    "EndpointTool",
    "MetricsDefinitionTool",
    "ToolMetadata",
    "ToolRegistry",
    "build_tool_registry",
]
