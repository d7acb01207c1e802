from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class VisitorCategory(str, Enum):
    """Visitor categories a request can be classified into"""
    BOT = "bot"
    BROWSING_AGENT = "browsing-agent"
    CODING_AGENT = "coding-agent"
    HUMAN = "human"


class Classification(BaseModel):
    """Classifier decision for a single request. Immutable once produced."""

    category: VisitorCategory
    agent: str
    filtered: bool = False

    model_config = ConfigDict(frozen=True)


class TrackRequest(BaseModel):
    """
    Telemetry submission sent to POST /track.

    Accepts both the long and the short field names (accept_header/accept,
    user_agent/ua). An empty value falls back to the alias, then to the default.
    """

    accept_header: str = ""
    user_agent: str = ""
    host: str = "unknown"
    path: str = "/"
    country: str = "unknown"

    @model_validator(mode="before")
    @classmethod
    def resolve_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        def pick(*keys: str, default: str) -> Any:
            for key in keys:
                value = data.get(key)
                if value:
                    return value
            return default

        return {
            "accept_header": pick("accept_header", "accept", default=""),
            "user_agent": pick("user_agent", "ua", default=""),
            "host": pick("host", default="unknown"),
            "path": pick("path", default="/"),
            "country": pick("country", default="unknown"),
        }

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "accept_header": "text/markdown, text/html;q=0.9",
                "user_agent": "claude-code/1.0.0",
                "host": "docs.example.com",
                "path": "/guides/quickstart",
                "country": "US",
            }
        }
    )


class TrackResponse(BaseModel):
    """Response of POST /track. Fields left as None are dropped from the JSON."""

    ok: bool = True
    skipped: Optional[str] = None
    category: Optional[VisitorCategory] = None
    agent: Optional[str] = None
    filtered: Optional[bool] = None


class DetectHeaders(BaseModel):
    user_agent: str
    accept: str


class DetectResponse(BaseModel):
    category: VisitorCategory
    agent: str
    filtered: Optional[bool] = None
    headers: DetectHeaders
