"""
Centralized configuration with environment variable overrides.

Platform rates, timeouts, and scheduling defaults are configurable here.
Nothing is hardcoded in pricing, matching, or notification logic.
"""

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_decimal(env_var: str, default: str) -> Decimal:
    """Parse a monetary rate or amount from an env var."""
    raw = os.getenv(env_var, default)
    try:
        return Decimal(raw)
    except (InvalidOperation, TypeError):
        raise ValueError(
            f"Invalid decimal for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class PricingConfig:
    """Platform take rate and card-processing fee schedule."""

    commission_rate: Decimal = _safe_decimal("COMMISSION_RATE", "0.18")
    processing_fee_rate: Decimal = _safe_decimal("PROCESSING_FEE_RATE", "0.029")
    processing_fee_fixed: Decimal = _safe_decimal("PROCESSING_FEE_FIXED", "0.30")
    currency: str = os.getenv("CURRENCY", "usd")


@dataclass(frozen=True)
class SchedulingConfig:
    """Booking duration defaults and availability search horizon."""

    default_duration_minutes: int = _safe_int("DEFAULT_DURATION_MINUTES", "120")
    search_horizon_days: int = _safe_int("AVAILABILITY_SEARCH_DAYS", "14")
    max_suggested_slots: int = _safe_int("MAX_SUGGESTED_SLOTS", "5")


@dataclass(frozen=True)
class NotificationConfig:
    """Outbound channel settings for provider and customer notifications."""

    channel_timeout_sec: float = _safe_float("CHANNEL_TIMEOUT_SEC", "10.0")
    sms_enabled: bool = _safe_bool("SMS_ENABLED", "true")
    platform_name: str = os.getenv("PLATFORM_NAME", "CleanConnect")


@dataclass(frozen=True)
class PersistenceConfig:
    """Limits for calls into the booking store."""

    write_timeout_sec: float = _safe_float("STORE_WRITE_TIMEOUT_SEC", "15.0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    pricing: PricingConfig = field(default_factory=PricingConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "cleanconnect-matching")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    for rate_name, rate_value in [
        ("COMMISSION_RATE", config.pricing.commission_rate),
        ("PROCESSING_FEE_RATE", config.pricing.processing_fee_rate),
    ]:
        if not Decimal("0") <= rate_value < Decimal("1"):
            raise ValueError(f"{rate_name} must be between 0 and 1, got {rate_value}")

    if config.pricing.processing_fee_fixed < 0:
        raise ValueError(
            f"PROCESSING_FEE_FIXED must be >= 0, got {config.pricing.processing_fee_fixed}"
        )
    if config.scheduling.default_duration_minutes < 1:
        raise ValueError(
            "DEFAULT_DURATION_MINUTES must be >= 1, "
            f"got {config.scheduling.default_duration_minutes}"
        )
    if config.scheduling.search_horizon_days < 1:
        raise ValueError(
            f"AVAILABILITY_SEARCH_DAYS must be >= 1, got {config.scheduling.search_horizon_days}"
        )
    if config.scheduling.max_suggested_slots < 1:
        raise ValueError(
            f"MAX_SUGGESTED_SLOTS must be >= 1, got {config.scheduling.max_suggested_slots}"
        )
    if config.notifications.channel_timeout_sec <= 0:
        raise ValueError(
            f"CHANNEL_TIMEOUT_SEC must be > 0, got {config.notifications.channel_timeout_sec}"
        )
    if config.persistence.write_timeout_sec <= 0:
        raise ValueError(
            "STORE_WRITE_TIMEOUT_SEC must be > 0, "
            f"got {config.persistence.write_timeout_sec}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
