from typing import Optional

import httpx

from showcase_bot.logging_config import get_logger
from showcase_bot.services.formatting import MARKDOWN_V2, strip_markdown

logger = get_logger("telegram_service")


class TelegramDownloadError(Exception):
    """Raised when the platform does not deliver a file's bytes."""


class TelegramService:
    """Outbound calls to the Telegram Bot API."""

    BASE_URL = "https://api.telegram.org/bot{token}"
    FILE_URL = "https://api.telegram.org/file/bot{token}/{file_path}"

    def __init__(self, bot_token: str, timeout: float = 30.0, download_timeout: float = 120.0):
        self.bot_token = bot_token
        self.base_url = self.BASE_URL.format(token=bot_token)
        self.timeout = timeout
        self.download_timeout = download_timeout

    def _make_request(self, method: str, data: Optional[dict] = None) -> dict:
        """Make request to Telegram API. Never raises."""
        url = f"{self.base_url}/{method}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(url, json=data or {})
                return response.json()
        except Exception as e:
            logger.error(f"Telegram API error: {method}: {e}")
            return {"ok": False, "error": str(e)}

    def send_message(self, chat_id, text: str, parse_mode: Optional[str] = MARKDOWN_V2) -> dict:
        """Send message to Telegram chat."""
        data = {"chat_id": chat_id, "text": text}
        if parse_mode:
            data["parse_mode"] = parse_mode
        return self._make_request("sendMessage", data)

    def safe_send_message(self, chat_id, text: str, parse_mode: Optional[str] = MARKDOWN_V2) -> bool:
        """Best-effort send: one plain-text retry if the formatted send is rejected."""
        result = self.send_message(chat_id, text, parse_mode)
        if result.get("ok"):
            return True

        logger.error(
            "Error sending Telegram message",
            extra={"context": {"chat_id": chat_id, "response": result.get("description") or result.get("error")}},
        )
        if not parse_mode:
            return False

        fallback = self.send_message(chat_id, strip_markdown(text), parse_mode=None)
        if fallback.get("ok"):
            return True
        logger.error("Fallback plain text message also failed", extra={"context": {"chat_id": chat_id}})
        return False

    def get_file_link(self, file_id: str) -> str:
        result = self._make_request("getFile", {"file_id": file_id})
        file_path = (result.get("result") or {}).get("file_path") if result.get("ok") else None
        if not file_path:
            raise TelegramDownloadError(
                f"Failed to get file link: {result.get('description') or result.get('error') or 'no file_path'}"
            )
        return self.FILE_URL.format(token=self.bot_token, file_path=file_path)

    def download_file(self, file_id: str) -> bytes:
        """Download raw bytes of an uploaded file via its file link."""
        file_link = self.get_file_link(file_id)
        with httpx.Client(timeout=self.download_timeout) as client:
            response = client.get(file_link)
        if response.status_code != 200:
            raise TelegramDownloadError(
                f"Failed to download file: {response.status_code} {response.reason_phrase}"
            )
        return response.content
