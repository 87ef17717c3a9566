"""High-level operators for bulk operations."""

from .bulk_operator import BulkOperator

__all__ = ["BulkOperator"]
