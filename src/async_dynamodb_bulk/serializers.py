"""
JSON serialization for DynamoDB items and table descriptors.

Items are stored in the low-level DynamoDB attribute value format
(``{"id": {"S": "a"}, "n": {"N": "1"}}``). Everything in that format is
plain JSON except binary values, which botocore hands out as ``bytes``:
they are written as base64 strings and turned back into ``bytes`` when a
file is read, so an export/import round-trip is lossless.
"""

import base64
import binascii
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict

from .exceptions import SerializationError


class DynamoDBJSONEncoder(json.JSONEncoder):
    """JSON encoder aware of the non-JSON types botocore returns."""

    def default(self, obj: Any) -> Any:
        """
        Convert botocore types to JSON-serializable values.

        Args:
            obj: Object the base encoder could not handle

        Returns:
            JSON-serializable representation
        """
        if isinstance(obj, (bytes, bytearray)):
            return base64.b64encode(bytes(obj)).decode("ascii")
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


def _decode_binary(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise SerializationError(f"Invalid base64 binary value: {value!r}", cause=e) from e


def decode_attribute_value(value: Dict[str, Any]) -> Dict[str, Any]:
    """
    Restore ``bytes`` in a single typed attribute value read from JSON.

    Args:
        value: Attribute value such as ``{"B": "aGk="}`` or ``{"M": {...}}``

    Returns:
        The attribute value with binary members decoded
    """
    if not isinstance(value, dict):
        raise SerializationError(f"Attribute value must be an object, got: {value!r}")

    if "B" in value:
        return {"B": _decode_binary(value["B"])}
    if "BS" in value:
        return {"BS": [_decode_binary(member) for member in value["BS"]]}
    if "M" in value:
        return {"M": decode_item(value["M"])}
    if "L" in value:
        return {"L": [decode_attribute_value(member) for member in value["L"]]}
    return value


def decode_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Restore an item read from a data file into a PutRequest-ready mapping.

    Raises:
        SerializationError: If the record is not an attribute map
    """
    if not isinstance(item, dict):
        raise SerializationError(f"Item must be a JSON object, got: {type(item).__name__}")
    return {name: decode_attribute_value(value) for name, value in item.items()}
