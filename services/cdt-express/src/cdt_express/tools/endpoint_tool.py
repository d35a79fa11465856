"""
Generic tool bound to one CDT Express endpoint.

A call flows through: control arguments split off, schema defaults
applied, input validated, URL template resolved, one or more pages fetched,
result formatted, response envelope built. Validation failures never reach
the network.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from common.logging import get_logger
from pydantic import BaseModel, ConfigDict

from cdt_express.core.constants import FETCH_ALL_ARGUMENT, FORMAT_ARGUMENT, FormatMode
from cdt_express.core.exceptions import ValidationError, ValidationIssue
from cdt_express.dispatch.envelope import ToolResponse, success_response
from cdt_express.dispatch.formatting import format_result
from cdt_express.dispatch.pagination import PageFetcher, PaginationWalker
from cdt_express.dispatch.template import UrlTemplate
from cdt_express.schemas.fields import FieldSchema, describe_type, validate_input
from cdt_express.tools.base import BaseTool, ToolMetadata

logger = get_logger(__name__)

_FORMAT_VALUES = tuple(mode.value for mode in FormatMode)


@dataclass(frozen=True)
class EndpointDefinition:
    """Declarative description of one API endpoint exposed as a tool."""

    name: str
    title: str
    description: str
    category: str
    schema: FieldSchema
    template: UrlTemplate
    paginated: bool = False


class DispatchControls(BaseModel):
    """Reserved arguments that steer dispatch and are never sent to the API."""

    model_config = ConfigDict(frozen=True)

    response_format: FormatMode = FormatMode.JSON
    fetch_all: bool = False


def control_parameters(paginated: bool) -> dict[str, dict[str, Any]]:
    """JSON Schema of the control arguments an endpoint accepts."""
    properties: dict[str, dict[str, Any]] = {
        FORMAT_ARGUMENT: {
            "type": "string",
            "enum": [mode.value for mode in FormatMode],
            "default": FormatMode.JSON.value,
            "description": "Response format: pretty-printed JSON or CSV of the result records",
        }
    }
    if paginated:
        properties[FETCH_ALL_ARGUMENT] = {
            "type": "boolean",
            "default": False,
            "description": (
                "Follow pagination cursors and return every record instead of the first page"
            ),
        }
    return properties


def split_controls(
    raw_input: Any, paginated: bool
) -> tuple[Any, DispatchControls, list[ValidationIssue]]:
    """
    Pop the control arguments off a raw input map.

    fetch_all is only reserved on paginated endpoints; elsewhere it stays in
    the input and is rejected like any other unknown field.

    Returns:
        The remaining input, the parsed controls, and any issues found
    """
    if not isinstance(raw_input, Mapping):
        return raw_input, DispatchControls(), []

    remaining = dict(raw_input)
    issues: list[ValidationIssue] = []

    response_format = remaining.pop(FORMAT_ARGUMENT, None)
    if response_format is None:
        response_format = FormatMode.JSON
    elif response_format not in _FORMAT_VALUES:
        members = " | ".join(f"'{mode.value}'" for mode in FormatMode)
        issues.append(
            ValidationIssue(
                field=FORMAT_ARGUMENT,
                reason=f"Invalid enum value. Expected {members}, received {response_format!r}",
            )
        )
        response_format = FormatMode.JSON

    fetch_all = False
    if paginated:
        raw_fetch_all = remaining.pop(FETCH_ALL_ARGUMENT, None)
        if isinstance(raw_fetch_all, bool):
            fetch_all = raw_fetch_all
        elif raw_fetch_all is not None:
            issues.append(
                ValidationIssue(
                    field=FETCH_ALL_ARGUMENT,
                    reason=f"Expected boolean, received {describe_type(raw_fetch_all)}",
                )
            )

    controls = DispatchControls(response_format=FormatMode(response_format), fetch_all=fetch_all)
    return remaining, controls, issues


class EndpointTool(BaseTool):
    """
    Tool that proxies one endpoint of the CDT Express API.

    Args:
        definition: Endpoint name, schema, URL template and pagination flag
        fetcher: Page source shared by every tool (normally CDTExpressClient)
        max_pages: Optional cap on pages fetched when fetch_all is requested
    """

    def __init__(
        self,
        definition: EndpointDefinition,
        fetcher: PageFetcher,
        max_pages: int | None = None,
    ) -> None:
        self.definition = definition
        self._walker = PaginationWalker(fetcher, max_pages=max_pages)
        super().__init__()

    def get_metadata(self) -> ToolMetadata:
        parameters = self.definition.schema.json_schema()
        parameters["properties"].update(control_parameters(self.definition.paginated))
        return ToolMetadata(
            name=self.definition.name,
            title=self.definition.title,
            description=self.definition.description,
            category=self.definition.category,
            parameters=parameters,
        )

    async def execute(self, **kwargs: Any) -> ToolResponse:
        schema = self.definition.schema
        raw_input, controls, control_issues = split_controls(kwargs, self.definition.paginated)

        try:
            validated = validate_input(schema, schema.apply_defaults(raw_input))
        except ValidationError as e:
            raise ValidationError([*control_issues, *e.issues]) from e
        if control_issues:
            raise ValidationError(control_issues)

        request = self.definition.template.resolve(validated)
        logger.debug(
            "endpoint_request_resolved",
            path=request.path,
            query_fields=list(request.query_params),
            fetch_all=controls.fetch_all,
            response_format=controls.response_format.value,
        )

        result = await self._walker.walk(request, exhaustive=controls.fetch_all)
        return success_response(format_result(result, controls.response_format))
