"""URL templates: path placeholder substitution and query residue."""

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, NamedTuple

from cdt_express.core.exceptions import ConfigurationError
from cdt_express.dispatch.query import stringify_scalar
from cdt_express.schemas.fields import ArrayField, FieldSchema, FieldValue

_PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ResolvedRequest(NamedTuple):
    """A request path with its placeholders filled, plus what is left for the query string."""

    path: str
    query_params: Mapping[str, FieldValue]


class UrlTemplate:
    """
    Immutable URL template such as "/v3/assets/{asset_id}/climate/scores".

    Example:
        ```python
        template = UrlTemplate("/assets/{asset_id}")
        request = template.resolve({"asset_id": "uuid1", "limit": 10})
        # request.path == "/assets/uuid1"; request.query_params == {"limit": 10}
        ```
    """

    __slots__ = ("_template", "_placeholders")

    def __init__(self, template: str) -> None:
        self._template = template
        self._placeholders = tuple(dict.fromkeys(_PLACEHOLDER_PATTERN.findall(template)))

    @property
    def template(self) -> str:
        return self._template

    @property
    def placeholders(self) -> tuple[str, ...]:
        return self._placeholders

    def __repr__(self) -> str:
        return f"UrlTemplate({self._template!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UrlTemplate) and other._template == self._template

    def __hash__(self) -> int:
        return hash(self._template)

    def check_schema(self, schema: FieldSchema) -> None:
        """
        Verify that every placeholder can always be filled from the schema.

        Raises:
            ConfigurationError: If a placeholder has no field, its field is
                optional, or its field is an array
        """
        problems: list[str] = []
        for name in self._placeholders:
            field = schema.properties.get(name)
            if field is None:
                problems.append(f"placeholder '{{{name}}}' has no matching field")
            elif isinstance(field, ArrayField):
                problems.append(f"placeholder '{{{name}}}' maps to an array field")
            elif not field.required:
                problems.append(f"placeholder '{{{name}}}' maps to an optional field")
        if problems:
            raise ConfigurationError(f"URL template {self._template!r}: " + "; ".join(problems))

    def resolve(self, validated_input: Mapping[str, Any]) -> ResolvedRequest:
        """
        Split validated input into path substitutions and query parameters.

        Fields whose placeholder occurs in the template are substituted
        literally (no URL encoding) and removed; the rest stay, in order, in
        the residual query map. Substituted values are never scanned for
        further placeholders.
        """
        substitutions: dict[str, str] = {}
        residual: dict[str, FieldValue] = {}
        for name, value in validated_input.items():
            if value is None:
                continue
            if name in self._placeholders:
                substitutions[name] = stringify_scalar(value)
            else:
                residual[name] = value
        path = _PLACEHOLDER_PATTERN.sub(
            lambda match: substitutions.get(match.group(1), match.group(0)), self._template
        )
        return ResolvedRequest(path=path, query_params=MappingProxyType(residual))
