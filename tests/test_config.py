from showcase_bot.config import Settings


class TestSettings:
    def test_upload_limit_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.pdf_uploads_per_window == 5
        assert settings.thumbnail_uploads_per_window == 10
        assert settings.rate_limit_window_seconds == 3600
        assert settings.listing_signed_url_hours == 24
        assert settings.asset_signed_url_minutes == 60

    def test_project_id_alias(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
        monkeypatch.setenv("PROJECT_ID", "showcase-prod")
        assert Settings(_env_file=None).google_cloud_project == "showcase-prod"

    def test_local_store_toggle_from_env(self, monkeypatch):
        monkeypatch.setenv("USE_LOCAL_STORE", "1")
        assert Settings(_env_file=None).use_local_store is True

    def test_only_consumed_keys_are_declared(self):
        assert "debug" not in Settings.model_fields
