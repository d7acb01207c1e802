"""
Factory for creating dataset sinks.
One cached instance per dataset name.
"""

import logging
from enum import Enum
from typing import Dict

from .strategies import (
    DatasetSink,
    InMemoryDatasetSink,
    SQLiteDatasetSink,
    ClickHouseDatasetSink,
)
from visits_app.config import settings

logger = logging.getLogger(__name__)


class SinkBackend(Enum):
    """Available dataset sink backends"""
    MEMORY = "memory"
    SQLITE = "sqlite"
    CLICKHOUSE = "clickhouse"


class SinkFactory:
    """
    Simple factory for creating dataset sinks.

    Gets configuration from settings (not passed as parameters).
    """

    _instances: Dict[str, DatasetSink] = {}  # Cache per dataset name

    @classmethod
    def create(cls, backend: SinkBackend, dataset: str) -> DatasetSink:
        """
        Create or return cached sink for a dataset.

        Args:
            backend: Type of sink backend (from enum)
            dataset: Dataset name

        Returns:
            Cached sink instance for the dataset

        Raises:
            ValueError: If backend is unknown
        """
        if dataset in cls._instances:
            return cls._instances[dataset]

        if backend == SinkBackend.MEMORY:
            instance = InMemoryDatasetSink(dataset)

        elif backend == SinkBackend.SQLITE:
            instance = SQLiteDatasetSink(dataset, db_path=settings.sink_sqlite_path)

        elif backend == SinkBackend.CLICKHOUSE:
            instance = ClickHouseDatasetSink(
                dataset,
                url=settings.sink_clickhouse_url,
                database=settings.sink_clickhouse_database,
            )

        else:
            raise ValueError(f"Unknown sink backend: {backend}")

        logger.info("%s sink initialized for dataset %s", backend.value, dataset)
        cls._instances[dataset] = instance
        return instance

    @classmethod
    def clear_instances(cls):
        """Clear cached instances (for testing)"""
        cls._instances.clear()
