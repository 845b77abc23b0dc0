# test/test_settings_loader.py
from movie_board.settings_loader import DEFAULT_CORS_ORIGINS, load_settings_from_env


def test_defaults(monkeypatch):
    for key in ("DB_URL", "MEDIA_ROOT", "MEDIA_BUCKET", "MEDIA_PUBLIC_BASE_URL", "CORS_ORIGINS"):
        monkeypatch.delenv(key, raising=False)

    settings = load_settings_from_env()

    assert settings.db_url == "sqlite+aiosqlite:///./app.db"
    assert settings.media_bucket == "media"
    assert settings.media_public_base_url == "http://localhost:8000/media"
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS


def test_overrides(monkeypatch):
    monkeypatch.setenv("MEDIA_BUCKET", "uploads")
    monkeypatch.setenv("MEDIA_PUBLIC_BASE_URL", "https://cdn.example.com/files/")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")

    settings = load_settings_from_env()

    assert settings.media_bucket == "uploads"
    assert settings.media_public_base_url == "https://cdn.example.com/files"
    assert settings.cors_origins == ("https://a.example", "https://b.example")
