from showcase_bot.schemas.showcase import HealthResponse, ShowcaseEntry, ShowcaseListResponse
from showcase_bot.schemas.telegram import TelegramMessage, TelegramUpdate, TelegramWebhookResponse

__all__ = [
    "HealthResponse",
    "ShowcaseEntry",
    "ShowcaseListResponse",
    "TelegramMessage",
    "TelegramUpdate",
    "TelegramWebhookResponse",
]
