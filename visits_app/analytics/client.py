"""
HTTP client for the Analytics Engine SQL API.

The API takes a SQL statement as a text/plain POST body and answers with
JSON. One request per query, no retries, no client-side timeout.
"""

import logging
from typing import Any, Optional, Tuple

import requests

from visits_app.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class AnalyticsEngineClient:
    """Sends SQL to /accounts/{account_id}/analytics_engine/sql"""

    def __init__(
        self,
        account_id: Optional[str],
        api_token: Optional[str],
        base_url: str = "https://api.cloudflare.com/client/v4",
        session: Optional[requests.Session] = None,
    ):
        self.account_id = account_id
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        """Both credentials are present"""
        return bool(self.account_id) and bool(self.api_token)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/analytics_engine/sql"

    def sql(self, query: str) -> Tuple[int, Any]:
        """
        Run a query and return (status code, decoded JSON body).

        The body is passed back untouched, including engine-side errors.

        Raises:
            UpstreamError: if the engine is unreachable or the body is not JSON
        """
        try:
            response = self.session.post(
                self.endpoint,
                headers={
                    "Authorization": f"Bearer {self.api_token}",
                    "Content-Type": "text/plain",
                },
                data=query.encode("utf-8"),
            )
            return response.status_code, response.json()
        except requests.RequestException as e:
            # JSONDecodeError is a RequestException subclass
            logger.error("Analytics Engine query failed: %s", e)
            raise UpstreamError(f"analytics engine request failed: {e}") from e
