"""
Remote analytics engine access (read side).
"""

from .client import AnalyticsEngineClient

__all__ = ["AnalyticsEngineClient"]
