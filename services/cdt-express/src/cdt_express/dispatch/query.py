"""Query-string encoding for resolved tool input."""

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import httpx

# Whole numbers below this print without an exponent
PLAIN_INTEGER_LIMIT = 1e21


def stringify_number(value: float) -> str:
    """
    Render a float the way a JSON number prints: 1.0 as "1", 1e21 as
    "1e+21", 1.5e-05 as "0.000015", 1e-07 as "1e-7".
    """
    if value.is_integer() and abs(value) < PLAIN_INTEGER_LIMIT:
        return str(int(value))
    text = repr(value)
    mantissa, marker, exponent = text.partition("e")
    if not marker:
        return text
    power = int(exponent)
    if -7 < power < 0:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'-' if power < 0 else '+'}{abs(power)}"


def stringify_scalar(value: Any) -> str:
    """Render a scalar the way the API expects it on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return stringify_number(value)
    return str(value)


def encode_value(value: Any) -> str:
    """Sequences become comma-joined lists; everything else is a scalar."""
    if isinstance(value, Sequence) and not isinstance(value, str):
        return ",".join(stringify_scalar(item) for item in value)
    return stringify_scalar(value)


def encode_query(params: Mapping[str, Any]) -> str:
    """
    Serialize a parameter map into a query string.

    Entries keep the map's order. None entries are omitted, while an empty
    sequence is kept as an empty value ("field="). Identical input always
    yields byte-identical output.
    """
    pairs = [(name, encode_value(value)) for name, value in params.items() if value is not None]
    return str(httpx.QueryParams(pairs))
