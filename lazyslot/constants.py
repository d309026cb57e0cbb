"""Library-wide constants and configuration defaults.

This module centralizes default values used across the slot strategies,
the registry and the settings layer.
"""

# =============================================================================
# Environment Configuration
# =============================================================================
ENV_PREFIX = "LAZYSLOT_"

# =============================================================================
# Construction Retry Defaults
# =============================================================================
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_INITIAL_DELAY_SECONDS = 0.1
DEFAULT_RETRY_MAX_DELAY_SECONDS = 2.0

# =============================================================================
# Construction Monitoring
# =============================================================================
DEFAULT_SLOW_CONSTRUCTION_WARNING_MS = 1000.0

# =============================================================================
# Logging
# =============================================================================
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# =============================================================================
# Race Demo
# =============================================================================
DEFAULT_DEMO_THREADS = 16
MIN_DEMO_THREADS = 2
MAX_DEMO_THREADS = 512
DEMO_CONSTRUCTION_DELAY_SECONDS = 0.05

# =============================================================================
# Default Slot Names
# =============================================================================
DEFAULT_REGISTRY_SLOT_NAME = "lazyslot.registry"
DEFAULT_SETTINGS_SLOT_NAME = "lazyslot.settings"
