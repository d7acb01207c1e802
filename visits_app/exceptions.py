"""
Domain exceptions.

Each exception maps to one JSON error response (see the handlers in main.py).
Services raise these; routes never build error payloads themselves.
"""

from typing import List


class VisitsError(Exception):
    """Base class for all service errors"""


class ConfigurationError(VisitsError):
    """Required operator configuration (credentials) is missing"""


class InvalidQueryError(VisitsError):
    """Caller asked for a query name that is not in the catalog"""

    def __init__(self, name: str, allowed: List[str]):
        super().__init__(f"invalid query: {name!r}")
        self.name = name
        self.allowed = allowed


class UpstreamError(VisitsError):
    """The analytics engine could not be reached or sent an unreadable reply"""


class SinkWriteError(VisitsError):
    """Appending a data point to a dataset failed"""

    def __init__(self, dataset: str, cause: Exception):
        super().__init__(f"write to {dataset} failed: {cause}")
        self.dataset = dataset
        self.cause = cause
