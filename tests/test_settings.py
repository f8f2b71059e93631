"""Tests for YAML settings loading."""
import pytest

from config.settings import Settings, get_settings, load_settings, reset_settings


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "app_name: TestHotel\n"
        "port: 8080\n"
        "log_level: debug\n"
        "storage:\n"
        "  backend: file\n"
        "  file_dir: ${STATE_DIR}\n"
        "channel:\n"
        "  reply_mode: connector\n"
        "  app_password: ${BOT_SECRET:-fallback}\n"
        "dialogs:\n"
        "  default_locale: de-DE\n"
    )
    return path


class TestLoadSettings:

    def test_defaults_when_file_missing(self, tmp_path):
        settings = load_settings(str(tmp_path / "missing.yaml"))
        assert settings == Settings()
        assert settings.storage.backend == "memory"
        assert settings.channel.reply_mode == "inline"

    def test_values_and_env_substitution(self, config_file, monkeypatch):
        monkeypatch.setenv("STATE_DIR", "/var/lib/hotel")
        monkeypatch.delenv("BOT_SECRET", raising=False)
        settings = load_settings(str(config_file))

        assert settings.app_name == "TestHotel"
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"
        assert settings.storage.backend == "file"
        assert settings.storage.file_dir == "/var/lib/hotel"
        assert settings.channel.reply_mode == "connector"
        assert settings.channel.app_password == "fallback"
        assert settings.dialogs.default_locale == "de-DE"

    def test_unset_variable_without_default_is_left_alone(self, config_file, monkeypatch):
        monkeypatch.delenv("STATE_DIR", raising=False)
        assert load_settings(str(config_file)).storage.file_dir == "${STATE_DIR}"

    def test_env_overrides_default(self, config_file, monkeypatch):
        monkeypatch.setenv("BOT_SECRET", "real-secret")
        assert load_settings(str(config_file)).channel.app_password == "real-secret"

    def test_config_path_from_environment(self, config_file, monkeypatch):
        monkeypatch.setenv("CONCIERGE_CONFIG", str(config_file))
        reset_settings()
        assert get_settings().app_name == "TestHotel"
        assert get_settings() is get_settings()
