"""
Linkman configuration.

Usage in settings.py:
    LINKMAN = {
        "QR_TOKEN_TTL_HOURS": 24,
        "SIGNUP_PRESET": "personal",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LinkmanSettings:
    """Linkman configuration settings."""

    # QR bootstrap tokens
    QR_TOKEN_TTL_HOURS: int = 24
    QR_TOKEN_BYTES: int = 32

    # Preset disclosed by a redeemer who has just signed up
    SIGNUP_PRESET: str = "personal"

    # Consumed tokens are kept this long for audit, then purged
    QR_RETENTION_DAYS: int = 30

    # Deliver notifications only after the surrounding transaction commits
    NOTIFY_ON_COMMIT: bool = True


def get_linkman_settings() -> LinkmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "LINKMAN", {})
    return LinkmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_linkman_settings(), name)


linkman_settings = _LazySettings()
