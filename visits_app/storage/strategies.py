"""
Dataset sink strategies using Strategy Pattern.

A sink is an append-only analytics dataset. The service only ever appends
data points; reading, retention and deletion belong to the engine behind
the sink.

- InMemoryDatasetSink: tests and local experiments
- SQLiteDatasetSink: development (zero setup)
- ClickHouseDatasetSink: production columnar storage over HTTP
"""

import asyncio
import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List

import requests

from visits_app.exceptions import SinkWriteError
from visits_app.storage.models import DataPoint

logger = logging.getLogger(__name__)

BLOB_COLUMNS = 5
DOUBLE_COLUMNS = 1


def _flatten(point: DataPoint) -> Dict[str, object]:
    """Map a data point onto the fixed blobN/doubleN/index1 columns"""
    row: Dict[str, object] = {
        "index1": point.indexes[0] if point.indexes else "",
    }
    for i in range(BLOB_COLUMNS):
        row[f"blob{i + 1}"] = point.blobs[i] if i < len(point.blobs) else ""
    for i in range(DOUBLE_COLUMNS):
        row[f"double{i + 1}"] = point.doubles[i] if i < len(point.doubles) else 0.0
    return row


class DatasetSink(ABC):
    """
    Abstract base class for dataset sinks.

    Writes are single, unbuffered and never retried. A failed write raises
    SinkWriteError so the caller sees it.
    """

    def __init__(self, dataset: str):
        self.dataset = dataset

    @abstractmethod
    async def write(self, point: DataPoint) -> None:
        """
        Append one data point to the dataset.

        Args:
            point: DataPoint with blobs, doubles and indexes

        Raises:
            SinkWriteError: if the underlying store rejected the write
        """
        pass


class InMemoryDatasetSink(DatasetSink):
    """
    Keeps appended points in a list.

    Not shared between processes and lost on restart.
    """

    def __init__(self, dataset: str):
        super().__init__(dataset)
        self.points: List[DataPoint] = []

    async def write(self, point: DataPoint) -> None:
        self.points.append(point)


class SQLiteDatasetSink(DatasetSink):
    """
    SQLite implementation, one table per dataset.

    Use case:
    - Development environment
    - Demos and testing
    """

    def __init__(self, dataset: str, db_path: str = "visits.db"):
        """
        Initialize SQLite dataset sink.

        Args:
            dataset: Dataset (and table) name
            db_path: Path to SQLite database file
        """
        super().__init__(dataset)
        self.db_path = db_path
        self._init_database()

    @property
    def _table(self) -> str:
        return '"' + self.dataset.replace('"', '""') + '"'

    def _init_database(self):
        """Create dataset table if it doesn't exist"""
        blob_columns = ", ".join(f"blob{i + 1} TEXT" for i in range(BLOB_COLUMNS))
        double_columns = ", ".join(f"double{i + 1} REAL" for i in range(DOUBLE_COLUMNS))

        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp DATETIME NOT NULL,
                    index1 TEXT,
                    {blob_columns},
                    {double_columns}
                )
            """)
            conn.commit()
        finally:
            conn.close()
        logger.info("SQLite dataset %s ready at %s", self.dataset, self.db_path)

    async def write(self, point: DataPoint) -> None:
        """Append a row (blocking sqlite3 call runs in a worker thread)"""
        row = _flatten(point)
        row["timestamp"] = datetime.now(timezone.utc).isoformat()

        try:
            await asyncio.to_thread(self._insert, row)
        except sqlite3.Error as e:
            raise SinkWriteError(self.dataset, e) from e

    def _insert(self, row: Dict[str, object]) -> None:
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)

        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                f"INSERT INTO {self._table} ({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
            conn.commit()
        finally:
            conn.close()


class ClickHouseDatasetSink(DatasetSink):
    """
    ClickHouse implementation for production analytics.

    Table design:
    - MergeTree engine, partitioned by month
    - Ordered by (index1, timestamp) so per-host queries prune well
    """

    def __init__(
        self,
        dataset: str,
        url: str = "http://localhost:8123",
        database: str = "ai_docs",
    ):
        """
        Initialize ClickHouse dataset sink.

        Args:
            dataset: Dataset (and table) name
            url: ClickHouse HTTP endpoint
            database: ClickHouse database holding the dataset tables
        """
        super().__init__(dataset)
        self.url = url
        self.database = database
        self._init_database()

    @property
    def table(self) -> str:
        return f"{self.database}.{self.dataset}"

    def _init_database(self):
        """Create database and table if they don't exist"""
        blob_columns = ", ".join(f"blob{i + 1} String" for i in range(BLOB_COLUMNS))
        double_columns = ", ".join(f"double{i + 1} Float64" for i in range(DOUBLE_COLUMNS))

        try:
            requests.post(
                self.url,
                data=f"CREATE DATABASE IF NOT EXISTS {self.database}",
            ).raise_for_status()
            requests.post(
                self.url,
                data=f"""
                    CREATE TABLE IF NOT EXISTS {self.table} (
                        timestamp DateTime,
                        index1 String,
                        {blob_columns},
                        {double_columns}
                    )
                    ENGINE = MergeTree()
                    PARTITION BY toYYYYMM(timestamp)
                    ORDER BY (index1, timestamp)
                """,
            ).raise_for_status()
            logger.info("ClickHouse dataset %s ready", self.table)

        except requests.RequestException as e:
            # Writes will surface the failure; startup continues
            logger.error(
                "ClickHouse initialization for %s failed, writes to it will fail: %s",
                self.table, e,
            )

    async def write(self, point: DataPoint) -> None:
        """Append a row (blocking HTTP call runs in a worker thread)"""
        row = _flatten(point)
        row["timestamp"] = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        try:
            await asyncio.to_thread(self._insert, row)
        except requests.RequestException as e:
            raise SinkWriteError(self.dataset, e) from e

    def _insert(self, row: Dict[str, object]) -> None:
        response = requests.post(
            self.url,
            params={"query": f"INSERT INTO {self.table} FORMAT JSONEachRow"},
            data=json.dumps(row),
        )
        response.raise_for_status()
