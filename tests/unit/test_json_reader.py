"""
Test incremental reading of data and schema files.

What this tests:
---------------
1. Array and objects layouts parsed element by element
2. Items spanning chunk boundaries
3. Binary values decoded back to bytes
4. Malformed, truncated and non-array files rejected

Why this matters:
----------------
- Import must not load the whole file into memory
- A corrupt backup must fail loudly instead of importing half the data
"""

import json

import pytest

from async_dynamodb_bulk.exceptions import ConfigurationError, SerializationError
from async_dynamodb_bulk.importers import JSONItemReader, read_schema


async def collect(reader):
    return [item async for item in reader.items()]


class TestJSONItemReader:
    """Test JSONItemReader."""

    def test_requires_path(self):
        """An empty path is a configuration error."""
        with pytest.raises(ConfigurationError):
            JSONItemReader("")

    def test_unknown_mode(self):
        """Only array and objects layouts are supported."""
        with pytest.raises(ConfigurationError):
            JSONItemReader("/tmp/x", options={"mode": "csv"})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chunk_size", [1, 7, 64 * 1024])
    async def test_reads_array(self, tmp_path, chunk_size):
        """
        Test array parsing with different chunk sizes.

        What this tests:
        ---------------
        1. Every element yielded in order
        2. Elements split across chunks reassembled

        Why this matters:
        ----------------
        - Chunk boundaries fall anywhere in real files
        """
        items = [{"pk": {"S": f"k{n}"}, "tags": {"SS": ["a", "b"]}} for n in range(20)]
        path = tmp_path / "data.json"
        path.write_text(json.dumps(items))

        result = await collect(JSONItemReader(str(path), options={"chunk_size": chunk_size}))

        assert result == items

    @pytest.mark.asyncio
    async def test_reads_objects_mode(self, tmp_path):
        """Newline-delimited objects are read one per line."""
        items = [{"pk": {"S": str(n)}} for n in range(5)]
        path = tmp_path / "data.jsonl"
        path.write_text("\n".join(json.dumps(item) for item in items) + "\n")

        result = await collect(JSONItemReader(str(path), options={"mode": "objects"}))

        assert result == items

    @pytest.mark.asyncio
    async def test_empty_array(self, tmp_path):
        """An empty array yields no items."""
        path = tmp_path / "empty.json"
        path.write_text("[]\n")

        assert await collect(JSONItemReader(str(path))) == []

    @pytest.mark.asyncio
    async def test_binary_decoded(self, tmp_path):
        """
        Test base64 binary values become bytes again.

        What this tests:
        ---------------
        1. B and BS decoded
        2. Nested maps and lists decoded recursively

        Why this matters:
        ----------------
        - botocore base64-encodes str values again, corrupting the data
        """
        path = tmp_path / "bin.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "pk": {"S": "a"},
                        "b": {"B": "AP8="},
                        "bs": {"BS": ["eA=="]},
                        "m": {"M": {"inner": {"B": "eQ=="}}},
                        "l": {"L": [{"B": "eg=="}, {"N": "1"}]},
                    }
                ]
            )
        )

        (item,) = await collect(JSONItemReader(str(path)))

        assert item["b"] == {"B": b"\x00\xff"}
        assert item["bs"] == {"BS": [b"x"]}
        assert item["m"] == {"M": {"inner": {"B": b"y"}}}
        assert item["l"] == {"L": [{"B": b"z"}, {"N": "1"}]}

    @pytest.mark.asyncio
    async def test_malformed_json(self, tmp_path):
        """Syntax errors raise SerializationError after the valid prefix."""
        path = tmp_path / "bad.json"
        path.write_text('[{"pk": {"S": "a"}}, {"pk": oops}]')

        seen = []
        with pytest.raises(SerializationError):
            async for item in JSONItemReader(str(path), options={"chunk_size": 8}).items():
                seen.append(item)

        assert seen == [{"pk": {"S": "a"}}]

    @pytest.mark.asyncio
    async def test_truncated_file(self, tmp_path):
        """
        Test a file cut off mid-array.

        What this tests:
        ---------------
        1. Complete elements before the cut are yielded
        2. SerializationError raised at the end

        Why this matters:
        ----------------
        - A partial export must not look like a complete one
        """
        path = tmp_path / "truncated.json"
        path.write_text('[{"pk": {"S": "a"}}, {"pk": {"S": "b"')

        seen = []
        with pytest.raises(SerializationError):
            async for item in JSONItemReader(str(path), options={"chunk_size": 8}).items():
                seen.append(item)

        assert seen == [{"pk": {"S": "a"}}]

    @pytest.mark.asyncio
    async def test_not_an_array(self, tmp_path):
        """A top-level object is rejected in array mode."""
        path = tmp_path / "object.json"
        path.write_text('{"pk": {"S": "a"}}')

        with pytest.raises(SerializationError, match="expected a JSON array"):
            await collect(JSONItemReader(str(path)))

    @pytest.mark.asyncio
    async def test_element_not_an_object(self, tmp_path):
        """Array elements must be attribute maps."""
        path = tmp_path / "numbers.json"
        path.write_text("[1, 2]")

        with pytest.raises(SerializationError):
            await collect(JSONItemReader(str(path)))

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """A data file that does not exist is a ConfigurationError, not an OSError."""
        path = tmp_path / "missing.dynamodata"

        with pytest.raises(ConfigurationError, match="Cannot open") as exc_info:
            await collect(JSONItemReader(str(path)))

        assert isinstance(exc_info.value.cause, FileNotFoundError)


class TestReadSchema:
    """Test read_schema()."""

    @pytest.mark.asyncio
    async def test_reads_object(self, tmp_path):
        path = tmp_path / "t.dynamoschema"
        path.write_text(json.dumps({"TableName": "t"}, indent=2))

        assert await read_schema(str(path)) == {"TableName": "t"}

    @pytest.mark.asyncio
    async def test_malformed(self, tmp_path):
        path = tmp_path / "bad.dynamoschema"
        path.write_text("{not json")

        with pytest.raises(SerializationError):
            await read_schema(str(path))

    @pytest.mark.asyncio
    async def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.dynamoschema"
        path.write_text("[]")

        with pytest.raises(SerializationError, match="JSON object"):
            await read_schema(str(path))

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, tmp_path):
        """
        Test a schema file that is not UTF-8.

        What this tests:
        ---------------
        1. Undecodable bytes raise SerializationError
        2. The UnicodeDecodeError is kept as the cause

        Why this matters:
        ----------------
        - A corrupt schema file must be reported like any other bad file
        """
        path = tmp_path / "latin.dynamoschema"
        path.write_bytes(b'{"TableName": "\xff\xfe"}')

        with pytest.raises(SerializationError, match="not UTF-8") as exc_info:
            await read_schema(str(path))

        assert isinstance(exc_info.value.cause, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot open"):
            await read_schema(str(tmp_path / "missing.dynamoschema"))
