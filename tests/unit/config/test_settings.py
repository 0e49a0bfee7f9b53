"""Unit tests for application settings."""

import pytest

from artcache.config import ArtSettings, HttpSettings, LastfmSettings, Settings


class TestArtSettings:
    """Tests for ArtSettings defaults and parsing."""

    def test_defaults(self) -> None:
        settings = ArtSettings()
        assert settings.enabled is True
        assert settings.resize_images is True
        assert settings.demo_mode is False
        assert settings.art_order == ["db", "tags", "folder", "musicbrainz", "lastfm"]
        assert settings.gc_types == ["album", "artist"]

    def test_art_order_from_comma_string(self) -> None:
        settings = ArtSettings(art_order="db, folder,,lastfm")
        assert settings.art_order == ["db", "folder", "lastfm"]

    def test_art_order_can_be_empty(self) -> None:
        assert ArtSettings(art_order=[]).art_order == []


class TestHttpSettings:
    """Tests for proxy URL building."""

    def test_no_proxy(self) -> None:
        assert HttpSettings().proxy_url is None

    def test_proxy_with_auth(self) -> None:
        settings = HttpSettings(proxy_host="proxy.lan", proxy_port=3128, proxy_user="u", proxy_pass="p")
        assert settings.proxy_url == "http://u:p@proxy.lan:3128"

    def test_proxy_without_port(self) -> None:
        assert HttpSettings(proxy_host="proxy.lan").proxy_url == "http://proxy.lan"


class TestSettings:
    """Tests for the root settings object."""

    def test_log_level_is_uppercased(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_nested_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARTCACHE_ART__DEMO_MODE", "true")
        monkeypatch.setenv("ARTCACHE_LASTFM__API_KEY", "abc123")
        settings = Settings()
        assert settings.art.demo_mode is True
        assert settings.lastfm.is_configured

    def test_lastfm_unconfigured_by_default(self) -> None:
        assert not LastfmSettings().is_configured
