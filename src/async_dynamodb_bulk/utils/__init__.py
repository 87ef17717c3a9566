"""Shared helpers: statistics, progress reporting, client calls and file names."""

from .aws import call_dynamodb
from .files import default_file_name, sanitize_filename
from .progress import ProgressReporter
from .stats import BulkOperationStats

__all__ = [
    "BulkOperationStats",
    "ProgressReporter",
    "call_dynamodb",
    "default_file_name",
    "sanitize_filename",
]
