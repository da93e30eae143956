"""
Configuration package for XML Funnel
"""

from .settings import (
    ApplicationSettings,
    Environment,
    ServiceSettings,
    XmlParsingSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "ApplicationSettings",
    "Environment",
    "ServiceSettings",
    "XmlParsingSettings",
    "get_settings",
    "reload_settings",
]
