"""Fixed-window rate limiter backed by the shared document store."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from showcase_bot.logging_config import get_logger
from showcase_bot.models.rate_limit import COLLECTION, RateLimitRecord, rate_limit_key
from showcase_bot.services.clock import now_ms as current_ms
from showcase_bot.services.store import DocumentStore, StoreDocumentError

logger = get_logger("rate_limiter")

HOUR_MS = 60 * 60 * 1000


class RateLimitOutcome(str, Enum):
    ALLOWED = "allowed"
    REFUSED = "refused"
    UNKNOWN = "unknown"  # backend fault, no decision was made


@dataclass
class RateLimitDecision:
    outcome: RateLimitOutcome
    remaining: Optional[int] = None
    retry_after_ms: Optional[int] = None
    cause: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == RateLimitOutcome.ALLOWED

    @property
    def retry_after_seconds(self) -> int:
        return math.ceil((self.retry_after_ms or 0) / 1000)

    def permits(self, fail_open: bool = True) -> bool:
        """Whether the caller may proceed. `fail_open` decides the UNKNOWN case."""
        if self.outcome == RateLimitOutcome.UNKNOWN:
            return fail_open
        return self.allowed


def check_and_increment(
    store: DocumentStore,
    key: str,
    limit: int,
    window_ms: int = HOUR_MS,
    now_ms: Optional[int] = None,
) -> RateLimitDecision:
    """Admit at most `limit` calls per fixed window starting at the first admitted call.

    The read-modify-write runs inside a store transaction. Any backend error
    yields an UNKNOWN decision carrying the cause.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    now = current_ms() if now_ms is None else now_ms

    def _apply(current: Optional[dict]):
        record = None
        if current is not None:
            try:
                record = RateLimitRecord.from_document(key, current)
            except StoreDocumentError as e:
                logger.warning(f"Resetting malformed rate limit record: {e}")

        if record is None or now - record.window_start >= window_ms:
            fresh = RateLimitRecord(count=1, window_start=now)
            return fresh.to_document(), RateLimitDecision(RateLimitOutcome.ALLOWED, remaining=limit - 1)

        if record.count < limit:
            record.count += 1
            return record.to_document(), RateLimitDecision(
                RateLimitOutcome.ALLOWED, remaining=limit - record.count
            )

        return None, RateLimitDecision(
            RateLimitOutcome.REFUSED,
            remaining=0,
            retry_after_ms=window_ms - (now - record.window_start),
        )

    try:
        return store.transact(COLLECTION, key, _apply)
    except Exception as e:
        logger.error(
            "Rate limiter backend failed, no decision made",
            exc_info=True,
            extra={"context": {"key": key, "store": store.name}},
        )
        return RateLimitDecision(RateLimitOutcome.UNKNOWN, cause=str(e) or e.__class__.__name__)


@dataclass
class UploadRateLimiter:
    """One limiter per upload purpose: same algorithm, different key and limit."""

    purpose: str
    limit: int
    window_ms: int = HOUR_MS

    def check(self, store: DocumentStore, subject_id: str | int, now_ms: Optional[int] = None) -> RateLimitDecision:
        return check_and_increment(
            store,
            rate_limit_key(subject_id, self.purpose),
            self.limit,
            self.window_ms,
            now_ms=now_ms,
        )
