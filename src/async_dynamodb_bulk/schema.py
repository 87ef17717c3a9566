"""
Table schema normalization.

A descriptor returned by DescribeTable mixes the fields needed to recreate
a table with runtime state (sizes, counts, ARNs, statuses, timestamps) that
CreateTable rejects. normalize_schema() strips the runtime state so the
descriptor can be replayed.
"""

import copy
from typing import Any, Dict, List

TABLE_RUNTIME_FIELDS = (
    "TableStatus",
    "CreationDateTime",
    "TableSizeBytes",
    "ItemCount",
    "TableArn",
    "LatestStreamLabel",
    "LatestStreamArn",
    "TableId",
)

THROUGHPUT_RUNTIME_FIELDS = (
    "LastIncreaseDateTime",
    "LastDecreaseDateTime",
    "NumberOfDecreasesToday",
)

LSI_RUNTIME_FIELDS = ("IndexSizeBytes", "ItemCount", "IndexArn")

GSI_RUNTIME_FIELDS = ("IndexStatus", "IndexSizeBytes", "ItemCount", "IndexArn")

GSI_THROUGHPUT_RUNTIME_FIELDS = ("NumberOfDecreasesToday",)

# Read-only summaries DescribeTable reports that CreateTable has no parameter for
DESCRIPTION_ONLY_FIELDS = (
    "SSEDescription",
    "RestoreSummary",
    "ArchivalSummary",
    "GlobalTableVersion",
    "Replicas",
)


def _drop(target: Any, fields: tuple) -> None:
    if not isinstance(target, dict):
        return
    for name in fields:
        target.pop(name, None)


def _indexes(descriptor: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    return descriptor.get(key) or []


def normalize_schema(descriptor: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove derived and runtime fields from a table descriptor.

    The descriptor is modified in place and returned. Fields or index lists
    that are absent are skipped, so normalizing twice is the same as
    normalizing once.

    Args:
        descriptor: The ``Table`` member of a DescribeTable response

    Returns:
        The same dictionary, now usable as a CreateTable request body
    """
    _drop(descriptor, TABLE_RUNTIME_FIELDS)
    _drop(descriptor.get("ProvisionedThroughput"), THROUGHPUT_RUNTIME_FIELDS)

    for index in _indexes(descriptor, "LocalSecondaryIndexes"):
        _drop(index, LSI_RUNTIME_FIELDS)

    for index in _indexes(descriptor, "GlobalSecondaryIndexes"):
        _drop(index, GSI_RUNTIME_FIELDS)
        _drop(index.get("ProvisionedThroughput"), GSI_THROUGHPUT_RUNTIME_FIELDS)

    return descriptor


def prepare_create_request(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn a normalized schema into CreateTable parameters.

    DescribeTable reports the billing mode as ``BillingModeSummary`` while
    CreateTable expects ``BillingMode``. On-demand tables also report
    zero-capacity throughput objects that CreateTable refuses in
    PAY_PER_REQUEST mode. Table class and warm throughput summaries are
    turned back into their request form, read-only summaries dropped and
    capacity change timestamps removed from index throughput.
    Everything else is passed through untouched.

    Args:
        schema: Output of normalize_schema()

    Returns:
        A new dictionary; ``schema`` is not modified
    """
    request = copy.deepcopy(schema)

    summary = request.pop("BillingModeSummary", None)
    if summary and "BillingMode" not in request and summary.get("BillingMode"):
        request["BillingMode"] = summary["BillingMode"]

    table_class = request.pop("TableClassSummary", None)
    if table_class and "TableClass" not in request and table_class.get("TableClass"):
        request["TableClass"] = table_class["TableClass"]

    _drop(request, DESCRIPTION_ONLY_FIELDS)
    _drop(request.get("WarmThroughput"), ("Status",))
    for index in _indexes(request, "GlobalSecondaryIndexes"):
        _drop(index.get("WarmThroughput"), ("Status",))
        # normalize_schema() keeps these on index throughput, CreateTable rejects them
        _drop(index.get("ProvisionedThroughput"), THROUGHPUT_RUNTIME_FIELDS)

    if request.get("BillingMode") == "PAY_PER_REQUEST":
        request.pop("ProvisionedThroughput", None)
        for index in _indexes(request, "GlobalSecondaryIndexes"):
            index.pop("ProvisionedThroughput", None)

    return request
