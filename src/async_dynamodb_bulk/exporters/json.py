"""
JSON data and schema files.

Data files come in two layouts. ``array`` (the default) is one JSON array
with an item per line, which is what import-data expects unless told
otherwise. ``objects`` is newline-delimited JSON, one item per line with no
enclosing brackets.
"""

import json
from typing import Any, Dict, Optional

from ..exceptions import ConfigurationError
from ..serializers import DynamoDBJSONEncoder
from ..utils.files import open_file
from .base import BaseExporter

JSON_MODES = ("array", "objects")


class JSONExporter(BaseExporter):
    """
    Write items as JSON in array or objects layout.

    Binary attribute values become base64 strings.
    """

    def __init__(self, output_path: str, options: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            output_path: Data file to create
            options:
                - mode: 'array' or 'objects' (default: 'array')
                - pretty: indent items, array layout only (default: False)

        Raises:
            ConfigurationError: For an unknown mode or pretty objects output
        """
        super().__init__(output_path, options)

        self.mode = self.options.get("mode", "array")
        if self.mode not in JSON_MODES:
            raise ConfigurationError(
                f"Unsupported JSON mode '{self.mode}'. Supported modes: {', '.join(JSON_MODES)}"
            )
        self.pretty = bool(self.options.get("pretty", False))
        if self.pretty and self.mode == "objects":
            # an indented object would span several lines
            raise ConfigurationError("pretty printing is not available in objects mode")

        self._encoder = DynamoDBJSONEncoder(indent=2 if self.pretty else None, ensure_ascii=False)
        self._first_item = True

    async def write_header(self) -> None:
        self._first_item = True
        if self._file and self.mode == "array":
            await self._file.write("[")

    async def write_item(self, item: Dict[str, Any]) -> None:
        if not self._file:
            return

        encoded = self._encoder.encode(item)
        if self.mode == "objects":
            await self._file.write(f"{encoded}\n")
            return

        separator = "\n" if self._first_item else ",\n"
        self._first_item = False
        await self._file.write(separator + encoded)

    async def write_footer(self) -> None:
        if self._file and self.mode == "array":
            # "[]" for an empty table, otherwise close on its own line
            await self._file.write("]\n" if self._first_item else "\n]\n")


async def write_schema(output_path: str, schema: Dict[str, Any]) -> None:
    """
    Write a table schema as JSON indented by two spaces.

    Datetimes (CreationDateTime and friends, if present) are written as
    ISO-8601 strings.
    """
    document = json.dumps(schema, indent=2, cls=DynamoDBJSONEncoder, ensure_ascii=False)
    f = await open_file(output_path, mode="w", encoding="utf-8")
    async with f:
        await f.write(document)
