"""Configuration module for artcache."""

from .settings import (
    ArtSettings,
    DatabaseSettings,
    HttpSettings,
    LastfmSettings,
    MusicBrainzSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ArtSettings",
    "DatabaseSettings",
    "HttpSettings",
    "LastfmSettings",
    "MusicBrainzSettings",
    "Settings",
    "get_settings",
]
