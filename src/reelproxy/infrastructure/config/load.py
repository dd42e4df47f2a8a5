"""Layered configuration loading for the reel proxy.

Four sources are merged, later ones winning key by key: the built-in
defaults, an optional YAML file, ``REELPROXY_*`` environment variables
(optionally seeded from a ``.env`` file) and the CLI flags.
"""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS: frozenset[str] = frozenset(
    {"http", "logging", "cache", "resolver", "store", "auth"}
)
_TOP_LEVEL: tuple[str, ...] = ("app_name", "environment", "cors_origins")

# Environment variables and CLI flags are flat; YAML and the schema are sectioned.
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_ttl_seconds": ("cache", "ttl_seconds"),
    "resolver_backend": ("resolver", "backend"),
    "lookup_api_url": ("resolver", "lookup_api_url"),
    "lookup_api_key": ("resolver", "lookup_api_key"),
    "lookup_api_host": ("resolver", "lookup_api_host"),
    "extraction_binary": ("resolver", "extraction_binary"),
    "extraction_format": ("resolver", "extraction_format"),
    "cookies_file": ("resolver", "cookies_file"),
    "extraction_timeout_seconds": ("resolver", "extraction_timeout_seconds"),
    "store_backend": ("store", "backend"),
    "store_dir": ("store", "dir"),
    "redis_url": ("store", "redis_url"),
    "admin_password": ("auth", "admin_password"),
    "admin_token": ("auth", "admin_token"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* in place; nested mappings merge per key."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one source into the sectioned shape ``AppConfig`` validates.

    Sectioned blocks (``resolver: {backend: ...}``) are copied as they are.
    Flat keys (``resolver_backend``) are moved into their section, so a
    flat key from the environment can override a single field of a YAML
    section without replacing the whole block.
    """
    out: dict[str, Any] = {
        section: dict(layer[section])
        for section in _SECTIONS
        if isinstance(layer.get(section), Mapping)
    }
    out.update({key: layer[key] for key in _TOP_LEVEL if key in layer})

    for flat_key, (section, field) in _FLAT_KEYS.items():
        if flat_key in layer:
            out.setdefault(section, {})[field] = layer[flat_key]
    return out


def _require_file(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(path)
    return path


def _read_yaml(path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(_require_file(path).read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated ``AppConfig`` for one process.

    Precedence: defaults < YAML < environment (.env included) < CLI.
    Only reads files; the store directory and cookie jar are created or
    checked later by the components that use them.

    Raises:
        FileNotFoundError: An explicitly given YAML or .env path is missing.
        pydantic.ValidationError: The merged values do not fit the schema.
    """
    if dotenv_path is not None:
        # Real environment variables keep priority over the .env file.
        load_dotenv(_require_file(dotenv_path), override=False)

    layers: list[Mapping[str, Any]] = [deepcopy(DEFAULT_CONFIG)]
    if config_path is not None:
        layers.append(_read_yaml(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _deep_merge(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
