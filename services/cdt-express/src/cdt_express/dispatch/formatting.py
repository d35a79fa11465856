"""Rendering of API results as pretty JSON or CSV text."""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from cdt_express.core.constants import FormatMode
from cdt_express.dispatch.pagination import WalkResult
from cdt_express.dispatch.query import PLAIN_INTEGER_LIMIT, stringify_scalar

VALUE_COLUMN = "value"
_CSV_SPECIAL_CHARS = (",", '"', "\n")


def _whole_floats_as_ints(payload: Any) -> Any:
    # Parsed bodies hold 1.0 where the API sent 1; print it back as 1
    if isinstance(payload, float):
        if payload.is_integer() and abs(payload) < PLAIN_INTEGER_LIMIT:
            return int(payload)
        return payload
    if isinstance(payload, Mapping):
        return {key: _whole_floats_as_ints(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_whole_floats_as_ints(item) for item in payload]
    return payload


def format_json(payload: Any) -> str:
    """Stable 2-space pretty print. Raw text bodies are passed through unchanged."""
    if isinstance(payload, str):
        return payload
    return json.dumps(_whole_floats_as_ints(payload), indent=2, ensure_ascii=False)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(_whole_floats_as_ints(value), ensure_ascii=False, separators=(",", ":"))
    return stringify_scalar(value)


def escape_csv_value(value: Any) -> str:
    """Quote a cell only when it holds a comma, a double quote or a newline."""
    text = _cell_text(value)
    if any(char in text for char in _CSV_SPECIAL_CHARS):
        return '"' + text.replace('"', '""') + '"'
    return text


def _as_row(record: Any) -> Mapping[str, Any]:
    return record if isinstance(record, Mapping) else {VALUE_COLUMN: record}


def format_csv(records: Sequence[Any]) -> str:
    """
    Render records as CSV.

    The header comes from the first record's keys, in its own order, and
    every later record is projected onto it: missing keys give empty cells
    and keys the first record lacks are dropped. No records, no output.
    """
    if not records:
        return ""
    columns = list(_as_row(records[0]).keys())
    lines = [",".join(escape_csv_value(column) for column in columns)]
    for record in records:
        row = _as_row(record)
        lines.append(",".join(escape_csv_value(row.get(column)) for column in columns))
    return "\n".join(lines)


def _records_for_csv(records: Any) -> Sequence[Any]:
    if records is None:
        return []
    if isinstance(records, Mapping) or isinstance(records, str):
        return [records]
    if isinstance(records, Sequence):
        return records
    return [records]


def format_result(result: WalkResult, mode: FormatMode | str = FormatMode.JSON) -> str:
    """Format what a pagination walk produced in the requested mode."""
    if FormatMode(mode) is FormatMode.CSV:
        return format_csv(_records_for_csv(result.records))
    return format_json(result.body)
