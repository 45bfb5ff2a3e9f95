from app.core.config import Settings


class TestSettings:
    def test_cors_origins_parses_json_list(self):
        settings = Settings(BACKEND_CORS_ORIGINS='["https://lvupedu.com","http://localhost:3001"]')

        assert settings.cors_origins == ["https://lvupedu.com", "http://localhost:3001"]

    def test_cors_origins_falls_back_on_invalid_json(self):
        settings = Settings(BACKEND_CORS_ORIGINS="not-json")

        assert settings.cors_origins == ["http://localhost:3000"]

    def test_only_declared_settings_are_exposed(self):
        settings = Settings(FRONTEND_URL="http://localhost:3000")

        assert "FRONTEND_URL" not in Settings.model_fields
        assert not hasattr(settings, "FRONTEND_URL")
