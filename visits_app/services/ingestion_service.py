import logging

from visits_app.config import settings
from visits_app.schemas.visit import TrackRequest, TrackResponse
from visits_app.services.classifier import classify, is_page_view
from visits_app.storage.models import ProcessedVisitRecord, RawEventRecord
from visits_app.storage.strategies import DatasetSink

logger = logging.getLogger(__name__)

NOT_PAGE_VIEW = "not-page-view"


class IngestionService:
    """
    Page view ingestion with the two dataset sinks injected.

    Every accepted page view is written twice: once to the raw dataset
    (exactly what was observed) and once to the visits dataset (the
    classification). The writes are independent; there is no rollback if
    the second one fails after the first succeeded.
    """

    def __init__(
        self,
        raw_sink: DatasetSink,
        visits_sink: DatasetSink,
        max_header_length: int = settings.max_header_length,
    ):
        """
        Initialize ingestion service with dependencies.

        Args:
            raw_sink: Sink for the raw events dataset
            visits_sink: Sink for the processed visits dataset
            max_header_length: Truncation length for user agent and Accept
        """
        self.raw_sink = raw_sink
        self.visits_sink = visits_sink
        self.max_header_length = max_header_length

    async def track(self, submission: TrackRequest) -> TrackResponse:
        """
        Record one telemetry submission.

        Flow:
        1. Skip anything that is not a page view (no writes)
        2. Classify the visitor
        3. Append raw event
        4. Append processed visit
        5. Return the decision

        Raises:
            SinkWriteError: if either dataset rejected its write
        """
        if not is_page_view(submission.accept_header):
            logger.debug("Skipping non page view from %s (accept=%r)",
                         submission.host, submission.accept_header)
            return TrackResponse(skipped=NOT_PAGE_VIEW)

        classification = classify(
            submission.user_agent,
            submission.accept_header,
            submission.host,
        )

        raw = RawEventRecord.capture(
            host=submission.host,
            path=submission.path,
            user_agent=submission.user_agent,
            accept_header=submission.accept_header,
            country=submission.country,
            max_length=self.max_header_length,
        )
        await self.raw_sink.write(raw.to_data_point())

        visit = ProcessedVisitRecord.from_classification(
            host=submission.host,
            path=submission.path,
            country=submission.country,
            classification=classification,
        )
        await self.visits_sink.write(visit.to_data_point())

        logger.debug("Tracked %s%s as %s/%s", submission.host, submission.path,
                     classification.category.value, classification.agent)

        return TrackResponse(
            category=classification.category,
            agent=classification.agent,
            filtered=True if classification.filtered else None,
        )
