"""Environment-driven configuration objects for the storefront API."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CART_BACKENDS = ("memory", "redis", "local")
EMAIL_PROVIDERS = ("gmail", "sendgrid", "custom")


def _str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(slots=True)
class RazorpayConfig:
    key_id: str
    key_secret: str
    verify_signature: bool = True

    @property
    def enabled(self) -> bool:
        return bool(self.key_id and self.key_secret)


@dataclass(slots=True)
class EmailConfig:
    provider: str
    user: str
    password: str
    host: str
    port: int
    from_address: str = '"City Roots" <noreply@cityroots.com>'
    reply_to: str = "help@cityroots.com"

    @property
    def enabled(self) -> bool:
        return bool(self.user and self.password)


@dataclass(slots=True)
class Settings:
    environment: str
    api_host: str
    api_port: int
    cart_backend: str
    redis_url: str | None
    local_storage_path: str
    razorpay: RazorpayConfig
    email: EmailConfig
    allowed_origins: list[str] = field(default_factory=list)

    @property
    def is_dev(self) -> bool:
        return self.environment in ("development", "dev", "local", "test")


def _load_email_config() -> EmailConfig:
    provider = os.getenv("EMAIL_PROVIDER", "gmail").strip().lower()
    if provider not in EMAIL_PROVIDERS:
        logger.warning("Unknown EMAIL_PROVIDER=%s, falling back to custom SMTP", provider)
        provider = "custom"

    if provider == "gmail":
        return EmailConfig(
            provider=provider,
            user=os.getenv("EMAIL_USER", ""),
            password=os.getenv("EMAIL_PASS", ""),
            host="smtp.gmail.com",
            port=587,
        )
    if provider == "sendgrid":
        return EmailConfig(
            provider=provider,
            user="apikey",
            password=os.getenv("SENDGRID_API_KEY", ""),
            host="smtp.sendgrid.net",
            port=587,
        )
    return EmailConfig(
        provider=provider,
        user=os.getenv("SMTP_USER", ""),
        password=os.getenv("SMTP_PASS", ""),
        host=os.getenv("SMTP_HOST", "localhost"),
        port=int(os.getenv("SMTP_PORT", "587")),
    )


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    environment = os.getenv("ENVIRONMENT", "production").strip().lower()

    cart_backend = os.getenv("CART_BACKEND", "").strip().lower()
    redis_url = os.getenv("REDIS_URL") or None
    if not cart_backend:
        # Redis when available, otherwise keep carts in process memory
        cart_backend = "redis" if redis_url else "memory"
    if cart_backend not in CART_BACKENDS:
        logger.warning("Unknown CART_BACKEND=%s, using memory", cart_backend)
        cart_backend = "memory"

    razorpay = RazorpayConfig(
        key_id=os.getenv("RAZORPAY_KEY_ID", ""),
        key_secret=os.getenv("RAZORPAY_KEY_SECRET", ""),
        verify_signature=_str_to_bool(os.getenv("RAZORPAY_VERIFY_SIGNATURE"), default=True),
    )
    if not razorpay.enabled:
        logger.warning("RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET not set, payment routes disabled")

    return Settings(
        environment=environment,
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=int(os.getenv("PORT", "5000")),
        cart_backend=cart_backend,
        redis_url=redis_url,
        local_storage_path=os.getenv("LOCAL_STORAGE_PATH", ".cityroots/local_storage.json"),
        razorpay=razorpay,
        email=_load_email_config(),
        allowed_origins=_split_csv(os.getenv("ALLOWED_ORIGINS")),
    )
