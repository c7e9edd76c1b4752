"""Weaver configuration package."""

from weaver.config.settings import (
    PACKAGE_TEMPLATE_DIR,
    WeaverSettings,
    load_settings,
    settings_from_env,
)

__all__ = [
    "PACKAGE_TEMPLATE_DIR",
    "WeaverSettings",
    "load_settings",
    "settings_from_env",
]
