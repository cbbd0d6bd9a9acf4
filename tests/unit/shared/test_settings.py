"""Tests for environment-based settings."""

import logging
import pytest

from domain.value_objects.auth_scope import AuthScope
from shared.config.settings import (
    DEFAULT_UPLOAD_PASSWORD,
    DriveConfig,
    Settings,
    TelegramConfig,
    UploadConfig,
)

ENV_VARS = [
    "TELEGRAM_TOKEN", "BOT_TOKEN", "UPLOAD_PASSWORD", "upload_password", "AUTH_SCOPE",
    "ALLOWED_EXTENSION", "DRIVE_FOLDER_ID", "folder_id", "DRIVE_FOLDER_NAME", "folder_name",
    "OAUTH_CREDENTIALS_PATH", "OAUTH_TOKEN_PATH", "SERVICE_CREDENTIALS_PATH",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestTelegramConfig:

    def test_token_required(self, clean_env):
        with pytest.raises(ValueError, match="TELEGRAM_TOKEN"):
            TelegramConfig.from_env()

    def test_bot_token_alias(self, clean_env):
        clean_env.setenv("BOT_TOKEN", "abc")
        assert TelegramConfig.from_env().token == "abc"


class TestUploadConfig:

    def test_defaults(self, clean_env):
        config = UploadConfig.from_env()

        assert config.password == DEFAULT_UPLOAD_PASSWORD
        assert config.password_is_default is True
        assert config.auth_scope is AuthScope.PER_CONVERSATION
        assert config.allowed_extension == ".jar"

    def test_configured(self, clean_env):
        clean_env.setenv("UPLOAD_PASSWORD", "hunter2")
        clean_env.setenv("AUTH_SCOPE", "shared_once")

        config = UploadConfig.from_env()

        assert config.password == "hunter2"
        assert config.password_is_default is False
        assert config.auth_scope is AuthScope.SHARED_ONCE

    def test_invalid_scope(self, clean_env):
        clean_env.setenv("AUTH_SCOPE", "everyone")

        with pytest.raises(ValueError):
            UploadConfig.from_env()


class TestDriveConfig:

    def test_defaults(self, clean_env):
        config = DriveConfig.from_env()

        assert config.folder_id is None
        assert config.folder_name == "MinecraftMods"
        assert config.oauth_credentials_path == "credentials.json"
        assert config.token_path == "token.json"
        assert config.service_credentials_path == "service_credentials.json"

    def test_folder_id(self, clean_env):
        clean_env.setenv("DRIVE_FOLDER_ID", "abc123")
        assert DriveConfig.from_env().folder_id == "abc123"


class TestSettings:

    def test_default_password_warning(self, clean_env, caplog):
        clean_env.setenv("TELEGRAM_TOKEN", "t")
        config = Settings.from_env()

        with caplog.at_level(logging.WARNING):
            config.warn_misconfiguration()

        assert "UPLOAD_PASSWORD is not set" in caplog.text

    def test_no_warning_with_password(self, clean_env, caplog):
        clean_env.setenv("TELEGRAM_TOKEN", "t")
        clean_env.setenv("UPLOAD_PASSWORD", "hunter2")
        config = Settings.from_env()

        with caplog.at_level(logging.WARNING):
            config.warn_misconfiguration()

        assert "UPLOAD_PASSWORD" not in caplog.text
