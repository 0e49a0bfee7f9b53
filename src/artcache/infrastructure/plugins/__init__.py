"""Metadata plugin registry."""

from artcache.infrastructure.plugins.registry import MetadataPluginRegistry

__all__ = ["MetadataPluginRegistry"]
