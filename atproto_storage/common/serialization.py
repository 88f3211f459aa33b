"""
Value Serialization

Values are persisted as text. Strings are stored verbatim, everything else
is JSON-encoded. On read the text is JSON-decoded first and returned raw
when that fails, so plain strings and structured values share one column.
"""

import json
from typing import Any, Tuple


def encode_value(value: Any) -> str:
    """
    Serialize a value for the `value` column

    Raises:
        TypeError: If the value is not JSON serializable
    """
    if isinstance(value, str):
        return value
    return json.dumps(value)


def try_decode(raw: Any) -> Tuple[Any, bool]:
    """
    Deserialize a stored value

    Returns:
        (value, parsed): the decoded value and True, or the raw text and False
    """
    try:
        return json.loads(raw), True
    except (TypeError, ValueError):
        return raw, False


def decode_value(raw: Any) -> Any:
    """Deserialize a stored value, falling back to the raw text"""
    return try_decode(raw)[0]
