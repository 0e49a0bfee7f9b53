"""Application settings.

Hey future me - everything configurable lives here, grouped into nested
sections. Environment variables use the ARTCACHE_ prefix and "__" as the
nested delimiter, e.g.:

    ARTCACHE_DATABASE__URL=sqlite+aiosqlite:///./artcache.db
    ARTCACHE_ART__ART_ORDER='["db", "tags", "folder", "musicbrainz"]'
    ARTCACHE_LASTFM__API_KEY=...

Tests construct Settings(...) directly with dicts for the nested sections.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite+aiosqlite:///./artcache.db",
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Log every SQL statement")
    pool_pre_ping: bool = Field(default=True, description="Check connections before use")
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=30, ge=1)
    pool_recycle: int = Field(default=3600, ge=-1)


class HttpSettings(BaseModel):
    """Outbound HTTP settings (remote art fetches)."""

    timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")
    proxy_host: str | None = Field(default=None, description="Proxy host, unset = direct")
    proxy_port: int | None = Field(default=None, ge=1, le=65535)
    proxy_user: str | None = None
    proxy_pass: str | None = None
    user_agent: str = Field(default="artcache/0.3.0")

    @property
    def proxy_url(self) -> str | None:
        """Proxy URL in httpx form, or None when no proxy is configured."""
        if not self.proxy_host:
            return None
        auth = ""
        if self.proxy_user:
            auth = f"{self.proxy_user}:{self.proxy_pass or ''}@"
        port = f":{self.proxy_port}" if self.proxy_port else ""
        return f"http://{auth}{self.proxy_host}{port}"


class MusicBrainzSettings(BaseModel):
    """MusicBrainz API settings.

    MusicBrainz wants a meaningful User-Agent with contact info, requests
    without one get throttled hard.
    """

    app_name: str = Field(default="artcache")
    app_version: str = Field(default="0.3.0")
    contact: str = Field(default="artcache@localhost")


class LastfmSettings(BaseModel):
    """Last.fm API settings."""

    api_key: str = Field(default="", description="Last.fm API key")
    api_secret: str = Field(default="", description="Last.fm API secret")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class ArtSettings(BaseModel):
    """Artwork gathering and cache behaviour."""

    enabled: bool = Field(default=True, description="Serve and gather art at all")
    art_order: list[str] = Field(
        default_factory=lambda: ["db", "tags", "folder", "musicbrainz", "lastfm"],
        description="Provider names tried in priority order",
    )
    resize_images: bool = Field(
        default=True, description="Create and serve the default 275x275 thumbnail"
    )
    demo_mode: bool = Field(default=False, description="Decline every art insert")
    gather_on_miss: bool = Field(
        default=True, description="Run the gather pipeline when no original is stored"
    )
    preferred_filename: str | None = Field(
        default=None, description="Folder art file that overrides all others (e.g. cover.jpg)"
    )
    gather_limit: int | None = Field(default=None, ge=1)
    web_path: str = Field(default="", description="Base path prepended to art URLs")
    gc_types: list[str] = Field(default_factory=lambda: ["album", "artist"])
    gc_owner_tables: dict[str, str] = Field(
        default_factory=lambda: {"album": "album", "artist": "artist"},
        description="object_type -> owning table with an integer id column",
    )
    google_search_url: str = Field(default="http://images.google.com/images")

    @field_validator("art_order", mode="before")
    @classmethod
    def _split_art_order(cls, value: object) -> object:
        # Allow "db,tags,folder" as well as a JSON list
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_prefix="ARTCACHE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = Field(default="artcache")
    app_env: Literal["development", "production", "test"] = Field(default="development")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False, description="Emit JSON log lines")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    musicbrainz: MusicBrainzSettings = Field(default_factory=MusicBrainzSettings)
    lastfm: LastfmSettings = Field(default_factory=LastfmSettings)
    art: ArtSettings = Field(default_factory=ArtSettings)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (reads the environment once)."""
    return Settings()
