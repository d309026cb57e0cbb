"""Utility modules shared by the slot strategies and the settings layer."""

from .timer_utils import elapsed_ms, Timer
from .env_utils import parse_int_env, parse_float_env, parse_str_env

__all__ = [
    # Timer utilities
    "elapsed_ms",
    "Timer",
    # Environment utilities
    "parse_int_env",
    "parse_float_env",
    "parse_str_env",
]
