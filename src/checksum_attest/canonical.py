"""
Canonical JSON serialization of attestation payloads.

The bytes produced here are what gets signed, so the output must not
depend on dict insertion order or interpreter version.

Rules (RFC 8785 subset):
- Object keys sorted by Unicode code point
- No whitespace between tokens
- Strings escaped minimally, non-ASCII kept as-is
- Enums serialize as their value, datetimes as ISO-8601 UTC ("Z")
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def canonical_json(value: Any) -> str:
    """
    Serialize a record payload to canonical JSON.

    Raises:
        TypeError: For values with no canonical form (floats, sets, objects)
    """
    if value is None:
        return "null"

    # bool before int
    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, Enum):
        return canonical_json(value.value)

    if isinstance(value, int):
        return str(value)

    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)

    if isinstance(value, datetime):
        return json.dumps(format_timestamp(value))

    if isinstance(value, (list, tuple)):
        return "[" + ",".join(canonical_json(item) for item in value) + "]"

    if isinstance(value, dict):
        pairs = [
            json.dumps(str(key), ensure_ascii=False) + ":" + canonical_json(value[key])
            for key in sorted(value, key=str)
        ]
        return "{" + ",".join(pairs) + "}"

    raise TypeError(f"No canonical JSON form for {type(value).__name__}")


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with microseconds and a "Z" suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
