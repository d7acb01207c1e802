"""
Test configuration and fixtures for the visits service.
Sinks and the analytics client are swapped for in-memory fakes through
FastAPI dependency overrides, so no test touches a real store or network.
"""

import pytest
from fastapi.testclient import TestClient
from main import app
from visits_app.analytics.client import AnalyticsEngineClient
from visits_app.dependencies import (
    get_analytics_client,
    get_raw_sink,
    get_visits_sink,
)
from visits_app.storage.strategies import InMemoryDatasetSink


class FakeAnalyticsClient(AnalyticsEngineClient):
    """Records SQL instead of sending it"""

    def __init__(self, account_id="acct-123", api_token="token-abc",
                 status_code=200, body=None):
        super().__init__(account_id=account_id, api_token=api_token)
        self.status_code = status_code
        self.body = body if body is not None else {"meta": [], "data": [], "rows": 0}
        self.queries = []

    def sql(self, query):
        self.queries.append(query)
        return self.status_code, self.body


@pytest.fixture(scope="function")
def raw_sink():
    return InMemoryDatasetSink("ai_docs_raw_events")


@pytest.fixture(scope="function")
def visits_sink():
    return InMemoryDatasetSink("ai_docs_visits")


@pytest.fixture
def make_analytics_client():
    """Factory for fake clients with custom credentials or replies"""
    return FakeAnalyticsClient


@pytest.fixture(scope="function")
def analytics_client():
    return FakeAnalyticsClient()


@pytest.fixture(scope="function")
def client(raw_sink, visits_sink, analytics_client):
    """
    Create a test client with sinks and analytics client overridden.
    This is the main fixture that tests will use.
    """
    app.dependency_overrides[get_raw_sink] = lambda: raw_sink
    app.dependency_overrides[get_visits_sink] = lambda: visits_sink
    app.dependency_overrides[get_analytics_client] = lambda: analytics_client

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
