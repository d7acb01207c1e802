"""
Named aggregate queries over the visit datasets.

Callers pick a query by name from a fixed catalog and may narrow it to one
host. Templates are kept as structured parts (columns, predicates, grouping)
and only turned into SQL text by QueryTemplate.render, which is also the
only place a caller-supplied value enters the query, always through
quote_literal.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from visits_app.analytics.client import AnalyticsEngineClient
from visits_app.exceptions import ConfigurationError, InvalidQueryError

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "default"
HOST_COLUMN = "blob1"

LAST_WEEK = "timestamp > NOW() - INTERVAL '7' DAY"
LAST_DAY = "timestamp > NOW() - INTERVAL '1' DAY"
NOT_FILTERED = "double1 = 0"
CODING_AGENTS = "blob3 = 'coding-agent'"
VISITS = "SUM(_sample_interval) as visits"


def escape_literal(value: str) -> str:
    """Double every single quote so the value cannot end a SQL string literal"""
    return value.replace("'", "''")


def quote_literal(value: str) -> str:
    return f"'{escape_literal(value)}'"


@dataclass(frozen=True)
class QueryTemplate:
    """A fixed aggregate query. The WHERE clause is always present."""

    name: str
    columns: Tuple[str, ...]
    table: str
    predicates: Tuple[str, ...]
    group_by: Tuple[str, ...] = ()
    order_by: str = "visits DESC"
    limit: Optional[int] = None

    def render(self, host: Optional[str] = None) -> str:
        """
        Render SQL text, optionally restricted to one host.

        The host predicate goes right after WHERE and is ANDed with the
        template's own predicates.
        """
        predicates = list(self.predicates)
        if host:
            predicates.insert(0, f"{HOST_COLUMN} = {quote_literal(host)}")

        lines = [
            f"SELECT {', '.join(self.columns)}",
            f"FROM {self.table}",
            f"WHERE {' AND '.join(predicates)}",
        ]
        if self.group_by:
            lines.append(f"GROUP BY {', '.join(self.group_by)}")
        if self.order_by:
            lines.append(f"ORDER BY {self.order_by}")
        if self.limit is not None:
            lines.append(f"LIMIT {self.limit}")
        return "\n".join(lines)

    @property
    def sql(self) -> str:
        return self.render()


def build_catalog(visits_table: str, raw_table: str) -> Dict[str, QueryTemplate]:
    """Build the query catalog for the given dataset tables (in display order)"""
    templates = [
        QueryTemplate(
            name=DEFAULT_QUERY,
            columns=("blob1 as host", "blob3 as category", "blob4 as agent", VISITS),
            table=visits_table,
            predicates=(LAST_WEEK, NOT_FILTERED),
            group_by=("host", "category", "agent"),
            limit=100,
        ),
        QueryTemplate(
            name="sites",
            columns=("blob1 as host", "blob3 as category", VISITS),
            table=visits_table,
            predicates=(LAST_WEEK, NOT_FILTERED),
            group_by=("host", "category"),
        ),
        QueryTemplate(
            name="agents",
            columns=("blob4 as agent", VISITS),
            table=visits_table,
            predicates=(LAST_WEEK, NOT_FILTERED, CODING_AGENTS),
            group_by=("agent",),
        ),
        QueryTemplate(
            name="all-agents",
            columns=("blob3 as category", "blob4 as agent", VISITS),
            table=visits_table,
            predicates=(LAST_WEEK, NOT_FILTERED),
            group_by=("category", "agent"),
        ),
        QueryTemplate(
            name="pages",
            columns=("blob1 as host", "blob2 as path", "blob4 as agent", VISITS),
            table=visits_table,
            predicates=(LAST_WEEK, CODING_AGENTS, NOT_FILTERED),
            group_by=("host", "path", "agent"),
            limit=50,
        ),
        QueryTemplate(
            name="feed",
            columns=("timestamp", "blob1 as host", "blob2 as path",
                     "blob3 as category", "blob4 as agent"),
            table=visits_table,
            predicates=(LAST_DAY, NOT_FILTERED),
            order_by="timestamp DESC",
            limit=50,
        ),
        QueryTemplate(
            name="raw",
            columns=("timestamp", "blob1 as host", "blob2 as path",
                     "blob3 as user_agent", "blob4 as accept_header"),
            table=raw_table,
            predicates=(LAST_DAY,),
            order_by="timestamp DESC",
            limit=100,
        ),
    ]
    return {template.name: template for template in templates}


class QueryGateway:
    """
    Forwards catalog queries to the analytics engine.

    Holds no per-request state; one instance can serve all requests.
    """

    def __init__(self, client: AnalyticsEngineClient, catalog: Dict[str, QueryTemplate]):
        self.client = client
        self.catalog = catalog

    @property
    def allowed(self) -> List[str]:
        return list(self.catalog)

    def build(self, name: Optional[str], host: Optional[str] = None) -> str:
        """
        Render the SQL for a catalog query.

        Raises:
            InvalidQueryError: if the name is not in the catalog
        """
        template = self.catalog.get(name or DEFAULT_QUERY)
        if template is None:
            raise InvalidQueryError(name, self.allowed)
        return template.render(host)

    def run(self, name: Optional[str], host: Optional[str] = None) -> Tuple[int, Any]:
        """
        Run a catalog query and return the engine's (status, body).

        Credentials are checked before anything else, so nothing is sent
        without them.

        Raises:
            ConfigurationError: if the account id or API token is missing
            InvalidQueryError: if the name is not in the catalog
            UpstreamError: if the engine cannot be reached
        """
        if not self.client.configured:
            logger.warning("Query %r refused: analytics credentials not configured", name)
            raise ConfigurationError("missing CF_ACCOUNT_ID or CF_API_TOKEN")

        sql = self.build(name, host)
        logger.debug("Running query %r (host=%r)", name or DEFAULT_QUERY, host)
        return self.client.sql(sql)
