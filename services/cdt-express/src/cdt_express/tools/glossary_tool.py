from typing import Any

from cdt_express.core.constants import METRICS, ToolCategory
from cdt_express.glossary import METRIC_DEFINITIONS
from cdt_express.tools.base import BaseTool, ToolMetadata


class MetricsDefinitionTool(BaseTool):
    """Returns the metrics glossary. Takes no arguments and never calls the API."""

    def get_metadata(self) -> ToolMetadata:
        return ToolMetadata(
            name="get_metrics_definition",
            title="Get Climate Metric Definitions",
            description=(
                f"Returns the official CDT Express definitions for metrics: {', '.join(METRICS)}."
            ),
            category=ToolCategory.GLOSSARY,
            parameters={
                "type": "object",
                "properties": {},
                "required": [],
                "additionalProperties": False,
            },
        )

    async def execute(self, **kwargs: Any) -> str:
        return METRIC_DEFINITIONS
