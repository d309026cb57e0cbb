"""
Library configuration.

All settings are configurable via environment variables with the LAZYSLOT_
prefix. A ``.env`` file in the working tree is loaded on first access.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_INITIAL_DELAY_SECONDS,
    DEFAULT_RETRY_MAX_DELAY_SECONDS,
    DEFAULT_SETTINGS_SLOT_NAME,
    DEFAULT_SLOW_CONSTRUCTION_WARNING_MS,
    ENV_PREFIX,
)
from .core.slots import LazySlot
from .utils.env_utils import parse_float_env, parse_int_env, parse_str_env


class SlotSettings(BaseSettings):
    """Configuration for slot construction and retries."""

    # Construction retry (used by lazyslot.accessor.retrying)
    retry_attempts: int = Field(
        default=DEFAULT_RETRY_ATTEMPTS,
        ge=1,
        description="Total construction attempts made by a retrying accessor",
    )
    retry_initial_delay_seconds: float = Field(
        default=DEFAULT_RETRY_INITIAL_DELAY_SECONDS,
        ge=0.0,
        description="Initial backoff delay between construction attempts",
    )
    retry_max_delay_seconds: float = Field(
        default=DEFAULT_RETRY_MAX_DELAY_SECONDS,
        ge=0.0,
        description="Upper bound on the backoff delay",
    )

    # Monitoring
    slow_construction_warning_ms: float = Field(
        default=DEFAULT_SLOW_CONSTRUCTION_WARNING_MS,
        ge=0.0,
        description="Construction time above which a warning is logged",
    )

    # Logging
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Log level used by the race demo entry point",
    )

    class Config:
        env_prefix = ENV_PREFIX
        case_sensitive = False

    @classmethod
    def from_env(cls) -> "SlotSettings":
        """Create settings from environment variables (and .env, if present)."""
        load_dotenv()
        return cls(
            retry_attempts=parse_int_env(f"{ENV_PREFIX}RETRY_ATTEMPTS", DEFAULT_RETRY_ATTEMPTS),
            retry_initial_delay_seconds=parse_float_env(
                f"{ENV_PREFIX}RETRY_INITIAL_DELAY_SECONDS", DEFAULT_RETRY_INITIAL_DELAY_SECONDS
            ),
            retry_max_delay_seconds=parse_float_env(
                f"{ENV_PREFIX}RETRY_MAX_DELAY_SECONDS", DEFAULT_RETRY_MAX_DELAY_SECONDS
            ),
            slow_construction_warning_ms=parse_float_env(
                f"{ENV_PREFIX}SLOW_CONSTRUCTION_WARNING_MS", DEFAULT_SLOW_CONSTRUCTION_WARNING_MS
            ),
            log_level=(parse_str_env(f"{ENV_PREFIX}LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
        )


# Settings singleton. The slot has a fixed warning threshold so that
# building the settings never consults the settings.
_settings_slot: LazySlot[SlotSettings] = LazySlot(
    SlotSettings.from_env,
    name=DEFAULT_SETTINGS_SLOT_NAME,
    slow_warning_ms=float("inf"),
)


def get_settings() -> SlotSettings:
    """Get the library settings singleton."""
    return _settings_slot.get()


def reset_settings() -> None:
    """Reset the settings singleton (for testing)."""
    _settings_slot.reset()
