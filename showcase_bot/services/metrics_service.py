"""Usage counters and the error-spike detector.

Both are advisory: failures are logged and never propagate to request handling.
"""

from typing import Optional

from pydantic import ValidationError

from showcase_bot.logging_config import get_logger
from showcase_bot.models.metric import COLLECTION, ERROR_SPIKE_DOC, ErrorSpikeRecord, MetricCounter
from showcase_bot.services.alert_service import alert_warning
from showcase_bot.services.clock import now_ms as current_ms
from showcase_bot.services.store import DocumentStore, StoreDocumentError

logger = get_logger("metrics")

ERRORS = "errors"
PDF_UPLOADS = "pdf_uploads"
THUMBNAIL_UPLOADS = "thumbnail_uploads"
RATE_LIMIT_HITS = "rate_limit_hits"

ERROR_SPIKE_WINDOW_MS = 5 * 60 * 1000
ERROR_SPIKE_THRESHOLD = 5


def increment_metric(store: DocumentStore, name: str, now_ms: Optional[int] = None) -> bool:
    """Increment a counter. Returns True if the increment fired an error-spike alert."""
    try:
        store.increment(COLLECTION, name)
    except Exception as e:
        logger.error(f"Failed to increment metric {name}: {e}", extra={"context": {"store": store.name}})
        return False

    if name == ERRORS:
        return record_error(store, now_ms)
    return False


def read_metric(store: DocumentStore, name: str) -> MetricCounter:
    """Current value of a counter; zero when it was never incremented."""
    data = store.get(COLLECTION, name)
    try:
        return MetricCounter.model_validate(data or {})
    except ValidationError as e:
        raise StoreDocumentError(f"Malformed {COLLECTION}/{name}: {e}") from e


def record_error(store: DocumentStore, now_ms: Optional[int] = None) -> bool:
    """Track recent error timestamps and alert once the threshold is reached."""
    now = current_ms() if now_ms is None else now_ms

    def _apply(current: Optional[dict]):
        try:
            record = ErrorSpikeRecord.from_document(current)
        except StoreDocumentError as e:
            logger.warning(f"Discarding malformed error spike record: {e}")
            record = ErrorSpikeRecord()

        recent = [ts for ts in record.timestamps if now - ts < ERROR_SPIKE_WINDOW_MS]
        recent.append(now)
        if len(recent) >= ERROR_SPIKE_THRESHOLD:
            return {"timestamps": []}, len(recent)
        return {"timestamps": recent}, 0

    try:
        spike_size = store.transact(COLLECTION, ERROR_SPIKE_DOC, _apply)
    except Exception as e:
        logger.error(f"Error spike check failed: {e}", extra={"context": {"store": store.name}})
        return False

    if not spike_size:
        return False

    logger.warning(
        f"[ALERT] Error spike detected: {spike_size} errors in last 5 minutes",
        extra={"context": {"store": store.name, "errors": spike_size}},
    )
    alert_warning("Error spike detected", {"errors_in_window": spike_size, "window": "5m", "store": store.name})
    return True
