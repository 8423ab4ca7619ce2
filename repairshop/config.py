"""
Centralized configuration with environment variable overrides.

Business hours, occupancy thresholds, and record store credentials are
configurable here. The aggregation and tiering code reads them from
``settings`` instead of hardcoding them.
"""

import logging
import os
from dataclasses import dataclass, field

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


def _safe_int_list(env_var: str, default: str) -> tuple[int, ...]:
    """Parse a comma-separated list of integers, e.g. ``"0,1,2,3,4"``."""
    raw = os.getenv(env_var, default)
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except (ValueError, TypeError, AttributeError):
        raise ValueError(
            f"Invalid integer list for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class ShopConfig:
    """Shop-level settings loaded from environment or defaults."""

    name: str = os.getenv("SHOP_NAME", "Fretline Guitar Repair")
    booking_window_days: int = _safe_int("BOOKING_WINDOW_DAYS", "30")


@dataclass(frozen=True)
class HoursConfig:
    """Public business hours. Workdays use ``date.weekday()`` numbering (Monday=0)."""

    start_hour: int = _safe_int("BUSINESS_START_HOUR", "9")
    end_hour: int = _safe_int("BUSINESS_END_HOUR", "18")
    workdays: tuple[int, ...] = _safe_int_list("BUSINESS_WORKDAYS", "0,1,2,3,4")


@dataclass(frozen=True)
class ThresholdConfig:
    """Occupancy tier thresholds for day totals and single slots."""

    day_busy_at: int = _safe_int("DAY_BUSY_AT", "7")
    day_normal_at: int = _safe_int("DAY_NORMAL_AT", "4")
    slot_busy_at: int = _safe_int("SLOT_BUSY_AT", "4")
    slot_normal_at: int = _safe_int("SLOT_NORMAL_AT", "2")


@dataclass(frozen=True)
class StoreConfig:
    """Hosted record store (Supabase) connection settings."""

    url: str = os.getenv("SUPABASE_URL", "")
    anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    orders_table: str = os.getenv("SUPABASE_ORDERS_TABLE", "guitar_repairs")
    timeout_sec: float = _safe_float("SUPABASE_TIMEOUT", "30.0")

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    shop: ShopConfig = field(default_factory=ShopConfig)
    hours: HoursConfig = field(default_factory=HoursConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    hours = config.hours
    if not 0 <= hours.start_hour < hours.end_hour <= 24:
        raise ValueError(
            "BUSINESS_START_HOUR/BUSINESS_END_HOUR must satisfy 0 <= start < end <= 24, "
            f"got {hours.start_hour}-{hours.end_hour}"
        )
    if not hours.workdays:
        raise ValueError("BUSINESS_WORKDAYS must name at least one weekday")
    for day in hours.workdays:
        if not 0 <= day <= 6:
            raise ValueError(f"BUSINESS_WORKDAYS entries must be 0-6, got {day}")

    if config.shop.booking_window_days < 0:
        raise ValueError(
            f"BOOKING_WINDOW_DAYS must be >= 0, got {config.shop.booking_window_days}"
        )

    thresholds = config.thresholds
    for prefix, busy_at, normal_at in [
        ("DAY", thresholds.day_busy_at, thresholds.day_normal_at),
        ("SLOT", thresholds.slot_busy_at, thresholds.slot_normal_at),
    ]:
        if normal_at < 1:
            raise ValueError(f"{prefix}_NORMAL_AT must be >= 1, got {normal_at}")
        if busy_at <= normal_at:
            raise ValueError(
                f"{prefix}_BUSY_AT must be greater than {prefix}_NORMAL_AT, "
                f"got {busy_at} <= {normal_at}"
            )

    if config.store.timeout_sec <= 0:
        raise ValueError(f"SUPABASE_TIMEOUT must be > 0, got {config.store.timeout_sec}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.shop.name)
    return config


# Singleton instance
settings = load_config()
