"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the dataset sinks and the
analytics query gateway that are injected into services and routes.
Tests swap them through app.dependency_overrides.
"""

from functools import lru_cache
from typing import Dict

from fastapi import Depends

from visits_app.analytics.client import AnalyticsEngineClient
from visits_app.config import settings
from visits_app.services.ingestion_service import IngestionService
from visits_app.services.query_service import QueryGateway, QueryTemplate, build_catalog
from visits_app.storage.factory import SinkBackend, SinkFactory
from visits_app.storage.strategies import DatasetSink


@lru_cache()
def get_raw_sink() -> DatasetSink:
    """
    Get the raw events sink (singleton).

    Returns:
        DatasetSink for settings.raw_events_dataset
    """
    backend = SinkBackend(settings.sink_backend)
    return SinkFactory.create(backend, settings.raw_events_dataset)


@lru_cache()
def get_visits_sink() -> DatasetSink:
    """
    Get the processed visits sink (singleton).

    Returns:
        DatasetSink for settings.visits_dataset
    """
    backend = SinkBackend(settings.sink_backend)
    return SinkFactory.create(backend, settings.visits_dataset)


@lru_cache()
def get_analytics_client() -> AnalyticsEngineClient:
    """Analytics Engine SQL client built from settings (may be unconfigured)"""
    return AnalyticsEngineClient(
        account_id=settings.cf_account_id,
        api_token=settings.cf_api_token,
        base_url=settings.analytics_api_base,
    )


@lru_cache()
def get_query_catalog() -> Dict[str, QueryTemplate]:
    """Named query catalog, built once over the configured dataset tables"""
    return build_catalog(settings.visits_dataset, settings.raw_events_dataset)


def get_query_gateway(
    client: AnalyticsEngineClient = Depends(get_analytics_client),
    catalog: Dict[str, QueryTemplate] = Depends(get_query_catalog),
) -> QueryGateway:
    return QueryGateway(client=client, catalog=catalog)


def get_ingestion_service(
    raw_sink: DatasetSink = Depends(get_raw_sink),
    visits_sink: DatasetSink = Depends(get_visits_sink),
) -> IngestionService:
    """
    Get IngestionService with both sinks injected.

    Routes depend on the service, the service depends on the sinks.
    """
    return IngestionService(raw_sink=raw_sink, visits_sink=visits_sink)
