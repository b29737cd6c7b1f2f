"""Webhook receiver settings loaded from the environment."""

from loguru import logger
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebhookSettings(BaseSettings):
    """Settings for receiving CloudConvert webhooks.

    Read from ``CLOUDCONVERT_*`` environment variables or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOUDCONVERT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    signing_secret: SecretStr = Field(description="Webhook signing secret from the CloudConvert dashboard")
    signature_header: str = Field(
        default="CloudConvert-Signature", description="Header carrying the hex signature"
    )
    webhook_path: str = Field(default="/webhooks/cloudconvert", description="Route path for deliveries")

    def secret_bytes(self) -> bytes:
        return self.signing_secret.get_secret_value().encode("utf-8")


_settings: WebhookSettings | None = None


def get_settings() -> WebhookSettings:
    """Get or create the global settings instance.

    Raises:
        pydantic.ValidationError: If ``CLOUDCONVERT_SIGNING_SECRET`` is not set.
    """
    global _settings
    if _settings is None:
        _settings = WebhookSettings()  # pyright: ignore[reportCallIssue]
        logger.debug(f"Loaded webhook settings: path={_settings.webhook_path}")
    return _settings
