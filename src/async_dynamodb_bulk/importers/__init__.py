"""
Readers for data and schema files.
"""

from .json import JSONItemReader, read_schema

__all__ = ["JSONItemReader", "read_schema"]
