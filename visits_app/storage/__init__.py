"""
Dataset sink module for visit analytics.

Strategy Pattern for pluggable append-only datasets (raw events and
processed visits).
"""

from .strategies import (
    DatasetSink,
    InMemoryDatasetSink,
    SQLiteDatasetSink,
    ClickHouseDatasetSink,
)
from .factory import SinkFactory, SinkBackend
from .models import DataPoint, RawEventRecord, ProcessedVisitRecord

__all__ = [
    "DatasetSink",
    "InMemoryDatasetSink",
    "SQLiteDatasetSink",
    "ClickHouseDatasetSink",
    "SinkFactory",
    "SinkBackend",
    "DataPoint",
    "RawEventRecord",
    "ProcessedVisitRecord",
]
