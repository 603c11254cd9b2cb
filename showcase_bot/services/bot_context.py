from dataclasses import dataclass
from typing import Optional

from showcase_bot.config import Settings
from showcase_bot.logging_config import get_logger
from showcase_bot.services.auth_service import RoleTable
from showcase_bot.services.conversation_service import ConversationStore
from showcase_bot.services.rate_limiter import UploadRateLimiter
from showcase_bot.services.secrets_service import BotSecrets, load_secrets
from showcase_bot.services.storage_service import StorageService
from showcase_bot.services.store import DocumentStore
from showcase_bot.services.telegram_service import TelegramService

logger = get_logger("bot_context")

PDF_PURPOSE = "pdf"
PHOTO_PURPOSE = "photo"


@dataclass
class BotContext:
    """Collaborators owned by one service instance."""

    settings: Settings
    store: DocumentStore
    telegram: TelegramService
    storage: StorageService
    roles: RoleTable
    conversations: ConversationStore
    pdf_limiter: UploadRateLimiter
    photo_limiter: UploadRateLimiter
    secrets: Optional[BotSecrets] = None


def build_bot_context(settings: Settings, store: DocumentStore, storage: StorageService) -> BotContext:
    secrets = load_secrets(settings)
    roles = RoleTable.from_settings(settings)
    roles.load(store)

    window_ms = settings.rate_limit_window_seconds * 1000
    ctx = BotContext(
        settings=settings,
        store=store,
        telegram=TelegramService(secrets.bot_token),
        storage=storage,
        roles=roles,
        conversations=ConversationStore(),
        pdf_limiter=UploadRateLimiter(PDF_PURPOSE, settings.pdf_uploads_per_window, window_ms),
        photo_limiter=UploadRateLimiter(PHOTO_PURPOSE, settings.thumbnail_uploads_per_window, window_ms),
        secrets=secrets,
    )
    logger.info(
        "Bot context initialized",
        extra={"context": {"store": store.name, "authorized_users": len(roles)}},
    )
    return ctx
