"""File name helpers for default export destinations and file opening."""

import os
import re
from pathlib import Path
from typing import Any

import aiofiles

from ..exceptions import ConfigurationError

SCHEMA_SUFFIX = ".dynamoschema"
DATA_SUFFIX = ".dynamodata"

# Characters that are illegal or reserved in file names on common platforms
_ILLEGAL = re.compile(r'[/\\?<>:*|"\x00-\x1f\x80-\x9f]')
_RESERVED = re.compile(r"^\.+$")
_WINDOWS_RESERVED = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")

MAX_FILENAME_BYTES = 255


def sanitize_filename(name: str, replacement: str = "") -> str:
    """
    Make ``name`` safe to use as a single path component.

    Illegal characters are replaced, names made only of dots and Windows
    device names are blanked, trailing dots/spaces are stripped and the
    result is truncated to 255 bytes.
    """
    sanitized = _ILLEGAL.sub(replacement, name)
    sanitized = _RESERVED.sub(replacement, sanitized)
    sanitized = _WINDOWS_RESERVED.sub(replacement, sanitized)
    sanitized = _WINDOWS_TRAILING.sub(replacement, sanitized)
    encoded = sanitized.encode("utf-8")[:MAX_FILENAME_BYTES]
    return encoded.decode("utf-8", errors="ignore")


def default_file_name(table_name: str, suffix: str, output_dir: str = ".") -> str:
    """
    Build the default export path for a table.

    Args:
        table_name: DynamoDB table name
        suffix: ``SCHEMA_SUFFIX`` or ``DATA_SUFFIX``
        output_dir: Directory to place the file in

    Returns:
        Path such as ``./users.dynamodata``
    """
    return os.path.join(output_dir, sanitize_filename(table_name + suffix))


async def open_file(path: str, mode: str = "r", **kwargs: Any) -> Any:
    """
    Open ``path`` with aiofiles.

    When writing, missing parent directories are created first.

    Returns:
        The open aiofiles handle, usable with ``async with``

    Raises:
        ConfigurationError: If the file cannot be opened, e.g. it does not
            exist or the directory is not writable
    """
    try:
        if "w" in mode:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        return await aiofiles.open(path, mode=mode, **kwargs)
    except OSError as e:
        raise ConfigurationError(f"Cannot open {path}: {e}", cause=e) from e
