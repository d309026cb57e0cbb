"""Environment variable utilities.

Parsers with type conversion and default handling, used when building
settings from the environment.
"""

import os
from typing import Optional


def parse_int_env(key: str, default: int) -> int:
    """Parse an integer value from an environment variable.

    Args:
        key: The environment variable name.
        default: Default value if the environment variable is not set or invalid.

    Returns:
        The integer value from the environment variable, or the default.
    """
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_float_env(key: str, default: float) -> float:
    """Parse a float value from an environment variable.

    Args:
        key: The environment variable name.
        default: Default value if the environment variable is not set or invalid.

    Returns:
        The float value from the environment variable, or the default.
    """
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def parse_str_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Parse a string value from an environment variable."""
    return os.getenv(key, default)
