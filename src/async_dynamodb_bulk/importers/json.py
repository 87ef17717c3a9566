"""
Incremental JSON readers for data and schema files.

Data files can hold millions of items, so they are parsed with ijson's
push interface: the file is read in fixed-size chunks and each complete
top-level element is yielded as soon as the parser has seen it.
"""

import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

import ijson  # type: ignore[import-untyped]

from ..exceptions import ConfigurationError, SerializationError
from ..serializers import decode_item
from ..utils.files import open_file

logger = logging.getLogger(__name__)

JSON_MODES = ("array", "objects")
DEFAULT_CHUNK_SIZE = 64 * 1024

_WHITESPACE = b" \t\r\n"


class JSONItemReader:
    """
    Read items from a data file one at a time.

    Supports the two layouts JSONExporter writes:
    - array: a single JSON array of items (default)
    - objects: newline-delimited JSON objects
    """

    def __init__(self, input_path: str, options: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            input_path: Data file to read
            options: Reader options:
                - mode: 'array' or 'objects' (default: 'array')
                - chunk_size: Bytes read per file access (default: 64 KiB)

        Raises:
            ConfigurationError: If input_path is empty or the mode is unknown
        """
        if not input_path:
            raise ConfigurationError("input_path cannot be empty")

        self.input_path = input_path
        self.options = options or {}
        self.mode = self.options.get("mode", "array")
        self.chunk_size = self.options.get("chunk_size", DEFAULT_CHUNK_SIZE)
        if self.mode not in JSON_MODES:
            raise ConfigurationError(
                f"Unsupported JSON mode '{self.mode}'. Supported modes: {', '.join(JSON_MODES)}"
            )

    def _make_parser(self, events: Any) -> Any:
        if self.mode == "array":
            return ijson.items_coro(events, "item")
        return ijson.items_coro(events, "", multiple_values=True)

    def _check_array_start(self, chunk: bytes) -> bool:
        """Return True once the first significant byte has been seen."""
        stripped = chunk.lstrip(_WHITESPACE)
        if not stripped:
            return False
        if not stripped.startswith(b"["):
            raise SerializationError(
                f"{self.input_path}: expected a JSON array of items, "
                f"found {stripped[:1].decode('utf-8', errors='replace')!r}"
            )
        return True

    async def items(self) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield decoded items in file order.

        Raises:
            ConfigurationError: If the file cannot be opened
            SerializationError: If the file is not valid JSON, is truncated,
                or contains something other than attribute maps
        """
        events = ijson.sendable_list()
        parser = self._make_parser(events)
        array_checked = self.mode != "array"
        count = 0

        f = await open_file(self.input_path, mode="rb")
        async with f:
            while True:
                chunk = await f.read(self.chunk_size)
                if not chunk:
                    break
                if not array_checked:
                    array_checked = self._check_array_start(chunk)
                error = None
                try:
                    parser.send(chunk)
                except ijson.JSONError as e:
                    error = e

                # Elements completed before a syntax error are still valid
                for record in events:
                    count += 1
                    yield decode_item(record)
                del events[:]

                if error is not None:
                    raise SerializationError(
                        f"{self.input_path}: malformed JSON after {count} items: {error}",
                        cause=error,
                    ) from error

        try:
            parser.close()
        except ijson.JSONError as e:
            raise SerializationError(
                f"{self.input_path}: truncated or malformed JSON after {count} items: {e}",
                cause=e,
            ) from e

        for record in events:
            count += 1
            yield decode_item(record)
        del events[:]

        logger.debug(f"Read {count} items from {self.input_path}")


async def read_schema(input_path: str) -> Dict[str, Any]:
    """
    Load a schema file.

    Raises:
        ConfigurationError: If the file cannot be opened
        SerializationError: If the file is not UTF-8 encoded JSON holding an
            object
    """
    f = await open_file(input_path, mode="r", encoding="utf-8")
    async with f:
        try:
            schema = json.loads(await f.read())
        except UnicodeDecodeError as e:
            raise SerializationError(f"{input_path}: schema is not UTF-8: {e}", cause=e) from e
        except json.JSONDecodeError as e:
            raise SerializationError(
                f"{input_path}: malformed schema JSON: {e}", cause=e
            ) from e

    if not isinstance(schema, dict):
        raise SerializationError(
            f"{input_path}: schema must be a JSON object, got {type(schema).__name__}"
        )
    return schema
