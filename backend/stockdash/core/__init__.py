"""
Core configuration and logging setup.
"""

from stockdash.core.config import Settings, get_settings
from stockdash.core.logging import configure_logging

__all__ = ["Settings", "get_settings", "configure_logging"]
