from unittest.mock import MagicMock

import pytest

from showcase_bot.config import Settings
from showcase_bot.schemas.telegram import TelegramUpdate
from showcase_bot.services.auth_service import RoleTable
from showcase_bot.services.bot_context import PDF_PURPOSE, PHOTO_PURPOSE, BotContext
from showcase_bot.services.conversation_service import ConversationStore
from showcase_bot.services.formatting import MARKDOWN_V2, strip_markdown
from showcase_bot.services.rate_limiter import HOUR_MS, UploadRateLimiter
from showcase_bot.services.storage_service import StorageService
from showcase_bot.services.store import LocalJsonStore
from showcase_bot.services.telegram_service import TelegramDownloadError

ADMIN_ID = 100
MANAGER_ID = 200
STRANGER_ID = 999


class FakeTelegram:
    """Records outbound messages and serves canned file bytes."""

    def __init__(self):
        self.sent = []
        self.files = {}
        self.fail_downloads = False

    def safe_send_message(self, chat_id, text, parse_mode=MARKDOWN_V2):
        self.sent.append((chat_id, text))
        return True

    def download_file(self, file_id):
        if self.fail_downloads:
            raise TelegramDownloadError("Failed to download file: 404 Not Found")
        return self.files.get(file_id, b"%PDF-1.4 test")

    @property
    def texts(self):
        return [strip_markdown(text) for _, text in self.sent]

    @property
    def last_text(self):
        return self.texts[-1] if self.sent else None


@pytest.fixture
def store(tmp_path):
    return LocalJsonStore(tmp_path / "store")


@pytest.fixture
def telegram():
    return FakeTelegram()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        telegram_bot_token="test-token",
        admin_user_id=str(ADMIN_ID),
        content_manager_user_id=str(MANAGER_ID),
        bucket_pdfs="test-pdfs",
        bucket_thumbnails="test-thumbnails",
    )


@pytest.fixture
def gcs_client():
    client = MagicMock()
    client.bucket.return_value.blob.return_value.generate_signed_url.return_value = (
        "https://storage.googleapis.com/test-pdfs/signed"
    )
    return client


@pytest.fixture
def storage(gcs_client):
    return StorageService(gcs_client, pdf_bucket="test-pdfs", thumbnail_bucket="test-thumbnails")


@pytest.fixture
def ctx(test_settings, store, telegram, storage):
    return BotContext(
        settings=test_settings,
        store=store,
        telegram=telegram,
        storage=storage,
        roles=RoleTable.from_settings(test_settings),
        conversations=ConversationStore(),
        pdf_limiter=UploadRateLimiter(PDF_PURPOSE, 5, HOUR_MS),
        photo_limiter=UploadRateLimiter(PHOTO_PURPOSE, 10, HOUR_MS),
    )


def make_update(user_id=ADMIN_ID, update_id=1, **content):
    """Build an update for a private chat with the given message content."""
    message = {
        "message_id": update_id,
        "date": 1702000000,
        "chat": {"id": user_id, "type": "private"},
        "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
        **content,
    }
    return TelegramUpdate(**{"update_id": update_id, "message": message})


def pdf_content(file_id="pdf-1", file_name="essay.pdf"):
    return {
        "document": {
            "file_id": file_id,
            "file_unique_id": f"u-{file_id}",
            "file_name": file_name,
            "mime_type": "application/pdf",
            "file_size": 1024,
        }
    }


def photo_content(prefix="photo"):
    return {
        "photo": [
            {"file_id": f"{prefix}-small", "file_unique_id": "s", "width": 90, "height": 90},
            {"file_id": f"{prefix}-large", "file_unique_id": "l", "width": 1280, "height": 960},
            {"file_id": f"{prefix}-medium", "file_unique_id": "m", "width": 320, "height": 240},
        ]
    }
