from dataclasses import dataclass
from typing import Optional
import logging
import os
from dotenv import load_dotenv

from domain.value_objects.auth_scope import AuthScope

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_PASSWORD = "password"


@dataclass
class TelegramConfig:
    """Telegram bot configuration"""
    token: str

    @classmethod
    def from_env(cls) -> "TelegramConfig":
        token = os.getenv("TELEGRAM_TOKEN") or os.getenv("BOT_TOKEN")
        if not token:
            raise ValueError("TELEGRAM_TOKEN is required")
        return cls(token=token)


@dataclass
class UploadConfig:
    """Upload session configuration

    password_is_default is set when UPLOAD_PASSWORD is missing and the
    built-in fallback is used. That is a deployment mistake and gets logged
    at startup; the bot still runs.
    """
    password: str = DEFAULT_UPLOAD_PASSWORD
    auth_scope: AuthScope = AuthScope.PER_CONVERSATION
    allowed_extension: str = ".jar"
    password_is_default: bool = True

    @classmethod
    def from_env(cls) -> "UploadConfig":
        password = os.getenv("UPLOAD_PASSWORD") or os.getenv("upload_password")
        return cls(
            password=password or DEFAULT_UPLOAD_PASSWORD,
            auth_scope=AuthScope.parse(os.getenv("AUTH_SCOPE", AuthScope.PER_CONVERSATION.value)),
            allowed_extension=os.getenv("ALLOWED_EXTENSION", ".jar"),
            password_is_default=not password,
        )


@dataclass
class DriveConfig:
    """Google Drive configuration

    write identity: OAuth client secrets + cached token (required)
    read identity:  service account JSON (optional, falls back to write)
    """
    folder_id: Optional[str] = None
    folder_name: str = "MinecraftMods"
    oauth_credentials_path: str = "credentials.json"
    token_path: str = "token.json"
    service_credentials_path: Optional[str] = "service_credentials.json"

    @classmethod
    def from_env(cls) -> "DriveConfig":
        return cls(
            folder_id=os.getenv("DRIVE_FOLDER_ID") or os.getenv("folder_id") or None,
            folder_name=os.getenv("DRIVE_FOLDER_NAME") or os.getenv("folder_name") or "MinecraftMods",
            oauth_credentials_path=os.getenv("OAUTH_CREDENTIALS_PATH", "credentials.json"),
            token_path=os.getenv("OAUTH_TOKEN_PATH", "token.json"),
            service_credentials_path=os.getenv("SERVICE_CREDENTIALS_PATH", "service_credentials.json"),
        )


@dataclass
class Settings:
    """Application settings"""
    telegram: TelegramConfig
    upload: UploadConfig
    drive: DriveConfig
    log_level: str = "INFO"
    log_dir: str = "logs"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            telegram=TelegramConfig.from_env(),
            upload=UploadConfig.from_env(),
            drive=DriveConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs"),
        )

    def warn_misconfiguration(self) -> None:
        """Log settings that work but should not reach production"""
        if self.upload.password_is_default:
            logger.warning(
                "UPLOAD_PASSWORD is not set, falling back to the built-in default password. "
                "Set UPLOAD_PASSWORD before exposing the bot."
            )


# Global settings instance
settings = Settings.from_env()
