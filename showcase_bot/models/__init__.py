from showcase_bot.models.authorized_user import AuthorizedUser
from showcase_bot.models.metric import ErrorSpikeRecord, MetricCounter
from showcase_bot.models.rate_limit import RateLimitRecord, rate_limit_key
from showcase_bot.models.role import Role
from showcase_bot.models.showcase_item import ShowcaseDraft, ShowcaseItem, ShowcaseStatus

__all__ = [
    "AuthorizedUser",
    "ErrorSpikeRecord",
    "MetricCounter",
    "RateLimitRecord",
    "Role",
    "ShowcaseDraft",
    "ShowcaseItem",
    "ShowcaseStatus",
    "rate_limit_key",
]
