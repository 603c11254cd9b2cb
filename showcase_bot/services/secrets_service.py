from dataclasses import dataclass
from typing import Optional

from showcase_bot.config import Settings
from showcase_bot.logging_config import get_logger

logger = get_logger("secrets_service")

BOT_TOKEN_SECRET = "telegram-bot-token"
GEMINI_KEY_SECRET = "gemini-api-key"


@dataclass
class BotSecrets:
    bot_token: str
    gemini_api_key: Optional[str] = None


def access_secret(client, project_id: str, secret_id: str) -> str:
    name = client.secret_version_path(project_id, secret_id, "latest")
    response = client.access_secret_version(request={"name": name})
    return response.payload.data.decode("utf-8")


def load_secrets(settings: Settings, client=None) -> BotSecrets:
    """Environment values win; anything missing comes from Secret Manager."""

    def _client():
        nonlocal client
        if client is None:
            from google.cloud import secretmanager

            client = secretmanager.SecretManagerServiceClient()
        return client

    if settings.telegram_bot_token:
        logger.info("Using TELEGRAM_BOT_TOKEN from environment")
        bot_token = settings.telegram_bot_token
    else:
        bot_token = access_secret(_client(), settings.google_cloud_project, BOT_TOKEN_SECRET)

    gemini_api_key = settings.gemini_api_key
    if gemini_api_key:
        logger.info("Using GEMINI_API_KEY from environment")
    else:
        try:
            gemini_api_key = access_secret(_client(), settings.google_cloud_project, GEMINI_KEY_SECRET)
        except Exception as e:
            # Only the voice stub would use it.
            logger.warning(f"AI-assist key unavailable: {e}")
            gemini_api_key = None

    if not bot_token:
        raise RuntimeError("No TELEGRAM_BOT_TOKEN and no Secret Manager value configured")
    return BotSecrets(bot_token=bot_token, gemini_api_key=gemini_api_key)
