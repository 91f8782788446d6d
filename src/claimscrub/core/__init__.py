# src/claimscrub/core/__init__.py
from claimscrub.core.config import Settings, configure_logging, get_settings
from claimscrub.core.exceptions import ClaimScrubError

__all__ = ["Settings", "get_settings", "configure_logging", "ClaimScrubError"]
