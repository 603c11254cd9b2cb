import os
import tempfile
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    telegram_bot_token: Optional[str] = None
    gemini_api_key: Optional[str] = None
    google_cloud_project: str = Field(
        default="project-id-placeholder",
        validation_alias=AliasChoices("GOOGLE_CLOUD_PROJECT", "PROJECT_ID"),
    )
    bucket_pdfs: str = "pdfs-bucket-placeholder"
    bucket_thumbnails: str = "thumbnails-bucket-placeholder"

    admin_user_id: Optional[str] = None
    content_manager_user_id: Optional[str] = None

    use_local_store: bool = False
    local_store_dir: str = os.path.join(tempfile.gettempdir(), "showcase_bot_store")
    thumbnails_dir: str = os.path.join("public", "thumbnails")

    pdf_uploads_per_window: int = 5
    thumbnail_uploads_per_window: int = 10
    rate_limit_window_seconds: int = 3600

    listing_signed_url_hours: int = 24
    asset_signed_url_minutes: int = 60

    alert_bot_token: Optional[str] = None
    alert_chat_id: Optional[str] = None

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
