"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
ResolverBackend = Literal["lookup_api", "extraction_tool"]
StoreBackend = Literal["file", "diskcache", "redis"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class ResolverConfig(BaseModel):
    """Resolver backend selection and per-backend settings.

    Only the settings of the selected backend are used.
    """

    backend: ResolverBackend = Field(
        default="lookup_api",
        description="'lookup_api' (third-party HTTP API) or 'extraction_tool' (CLI).",
    )

    # Third-party lookup API
    lookup_api_url: str = Field(
        default="https://instagram-reels-downloader-api.p.rapidapi.com/download",
        description="Lookup endpoint; receives the normalized URL as ?url=.",
    )
    lookup_api_key: str | None = Field(
        default=None,
        description="API key sent as X-RapidAPI-Key.",
    )
    lookup_api_host: str | None = Field(
        default=None,
        description="X-RapidAPI-Host header. Defaults to the lookup URL's hostname.",
    )

    # Local extraction tool
    extraction_binary: str = Field(
        default="yt-dlp",
        description="Extraction tool executable (name on PATH or absolute path).",
    )
    extraction_format: str = Field(
        default="best[ext=mp4]/best",
        description="Format selector passed via -f.",
    )
    cookies_file: Path = Field(
        default=Path("./cookies.txt"),
        description="Cookie jar passed to the tool when the file exists.",
    )
    extraction_timeout_seconds: float = Field(
        default=60.0,
        description="Kill the extraction tool after this many seconds.",
    )

    # Shared
    page_link_domains: list[str] = Field(
        default=["instagram.com", "youtube.com", "youtu.be", "tiktok.com"],
        description="Source-page domains; URLs on these hosts are never media.",
    )

    @field_validator("cookies_file", mode="before")
    @classmethod
    def _validate_cookies_file(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("extraction_timeout_seconds")
    @classmethod
    def _validate_extraction_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("extraction_timeout_seconds must be > 0")
        return v


class StoreConfig(BaseModel):
    """Content store configuration (playlist + submissions)."""

    model_config = ConfigDict(populate_by_name=True)

    backend: StoreBackend = Field(
        default="file",
        description="'file' (JSON files), 'diskcache' (SQLite) or 'redis'.",
    )
    directory: Path = Field(
        default=Path("./data"),
        alias="dir",
        description="JSON file directory / diskcache SQLite path.",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (only when backend=redis)",
    )
    key_prefix: str = Field(
        default="reelproxy",
        description="Key prefix for key-value backends.",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)


class AuthConfig(BaseModel):
    """Shared-secret admin credentials."""

    admin_password: str | None = Field(
        default=None,
        description="Password accepted by /api/auth/login. Unset = login disabled.",
    )
    admin_token: str | None = Field(
        default=None,
        description="Static bearer token. Unset = random token per process.",
    )


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/resolver/store/auth).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="reelproxy", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout for lookup API calls and for establishing streams.",
    )
    http_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Browser User-Agent sent to media CDNs.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Resolution cache (YAML section: cache.*)
    cache_ttl_seconds: int = Field(
        default=3600,
        validation_alias=AliasChoices(
            "cache_ttl_seconds",
            AliasPath("cache", "ttl_seconds"),
        ),
        description="How long a resolved direct URL is reused (seconds).",
    )

    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins for the browser UI.",
    )

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def _validate_cache_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache_ttl_seconds must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read REELPROXY_* variables, converts
    them to a dict of set values and merges that into YAML/defaults before
    validating AppConfig.

    Supported env var examples (flat, explicit):
    - REELPROXY_LOG_LEVEL
    - REELPROXY_RESOLVER_BACKEND
    - REELPROXY_LOOKUP_API_KEY
    - REELPROXY_ADMIN_PASSWORD
    - REELPROXY_STORE_BACKEND
    """

    model_config = SettingsConfigDict(
        env_prefix="REELPROXY_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_ttl_seconds: Optional[int] = None

    resolver_backend: Optional[ResolverBackend] = None
    lookup_api_url: Optional[str] = None
    lookup_api_key: Optional[str] = None
    lookup_api_host: Optional[str] = None
    extraction_binary: Optional[str] = None
    extraction_format: Optional[str] = None
    cookies_file: Optional[Path] = None
    extraction_timeout_seconds: Optional[float] = None

    store_backend: Optional[StoreBackend] = None
    store_dir: Optional[Path] = None
    redis_url: Optional[str] = None

    admin_password: Optional[str] = None
    admin_token: Optional[str] = None

    @field_validator("cookies_file", "store_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
