"""Utility functions and helpers.

- Logging configuration
- Deep merge and environment overlay for nested config mappings

Usage:
    from bento.utils import setup_logging, deep_merge, apply_environment

    setup_logging(debug_mode=True, log_level="DEBUG")
    config = apply_environment(config, "production")
"""

from bento.utils.logging_config import setup_logging
from bento.utils.merge import deep_merge, apply_environment

__all__ = [
    # Logging
    "setup_logging",

    # Merging
    "deep_merge",
    "apply_environment",
]
