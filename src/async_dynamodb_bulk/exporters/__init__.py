"""
Exporters for item data files.

Provides the streaming JSON exporter used to write DynamoDB items to disk.
"""

from .base import BaseExporter
from .json import JSONExporter, write_schema

__all__ = ["BaseExporter", "JSONExporter", "write_schema"]
