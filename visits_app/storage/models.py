"""
Records written to the two analytics datasets.

Both datasets store Analytics Engine style data points: positional string
blobs, numeric doubles, and one index used for sampling and filtering.

RAW_EVENTS (immutable capture):
    blob1 host, blob2 path, blob3 user_agent, blob4 accept_header,
    blob5 country, index1 host

VISITS (processed classification):
    blob1 host, blob2 path, blob3 category, blob4 agent, blob5 country,
    double1 is_filtered, index1 host
"""

from typing import List

from pydantic import BaseModel, Field

from visits_app.schemas.visit import Classification


class DataPoint(BaseModel):
    """One append to a dataset"""

    blobs: List[str] = Field(default_factory=list)
    doubles: List[float] = Field(default_factory=list)
    indexes: List[str] = Field(default_factory=list)


class RawEventRecord(BaseModel):
    """Unprocessed observation of a page view"""

    host: str
    path: str
    user_agent: str
    accept_header: str
    country: str

    @classmethod
    def capture(
        cls,
        host: str,
        path: str,
        user_agent: str,
        accept_header: str,
        country: str,
        max_length: int = 500,
    ) -> "RawEventRecord":
        """Build a record, truncating the free-form headers to max_length"""
        return cls(
            host=host,
            path=path,
            user_agent=user_agent[:max_length],
            accept_header=accept_header[:max_length],
            country=country,
        )

    def to_data_point(self) -> DataPoint:
        return DataPoint(
            blobs=[self.host, self.path, self.user_agent, self.accept_header, self.country],
            indexes=[self.host],
        )


class ProcessedVisitRecord(BaseModel):
    """Classified page view"""

    host: str
    path: str
    category: str
    agent: str
    country: str
    is_filtered: int = Field(0, ge=0, le=1)

    @classmethod
    def from_classification(
        cls,
        host: str,
        path: str,
        country: str,
        classification: Classification,
    ) -> "ProcessedVisitRecord":
        return cls(
            host=host,
            path=path,
            category=classification.category.value,
            agent=classification.agent,
            country=country,
            is_filtered=1 if classification.filtered else 0,
        )

    def to_data_point(self) -> DataPoint:
        return DataPoint(
            blobs=[self.host, self.path, self.category, self.agent, self.country],
            doubles=[float(self.is_filtered)],
            indexes=[self.host],
        )
