"""
Onboarding service package initialization.
"""
from onboard.config import settings
from onboard.logger import configure_logging, get_logger

__version__ = "1.0.0"

__all__ = ["settings", "configure_logging", "get_logger", "__version__"]
