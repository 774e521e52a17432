"""Shared path helpers for the prototypes tree, the gallery and its cache."""

from __future__ import annotations

import os
from pathlib import Path

import config as cfg


class PathValidationError(ValueError):
    """Raised when an item name is invalid or unsafe."""


def _resolve(cli_value: str | None, env_name: str, default: Path) -> Path:
    if cli_value:
        return Path(cli_value).expanduser()

    env_value = os.getenv(env_name)
    if env_value:
        return Path(env_value).expanduser()

    return Path(default).expanduser()


def resolve_prototypes_dir(cli_value: str | None = None) -> Path:
    """Resolve the prototypes root with priority: CLI -> env -> config.py."""
    return _resolve(cli_value, cfg.PROTOTYPES_DIR_ENV, cfg.PROTOTYPES_DIR)


def resolve_gallery_dir(cli_value: str | None = None) -> Path:
    """Resolve the gallery output dir with priority: CLI -> env -> config.py."""
    return _resolve(cli_value, cfg.GALLERY_DIR_ENV, cfg.GALLERY_DIR)


def resolve_cache_path(cli_value: str | None = None, gallery_dir: Path | None = None) -> Path:
    """Resolve the deployments cache file.

    Without an explicit CLI or env value the cache lives inside the gallery
    directory, so it follows --gallery-dir.
    """
    if cli_value:
        return Path(cli_value).expanduser()

    env_value = os.getenv(cfg.CACHE_FILE_ENV)
    if env_value:
        return Path(env_value).expanduser()

    if gallery_dir is not None:
        return gallery_dir / cfg.DEPLOYMENT_CACHE_NAME
    return cfg.DEPLOYMENT_CACHE


def validate_segment(value: str) -> str:
    """Validate a single folder name used for a category or a prototype."""
    name = (value or "").strip()
    if not name:
        raise PathValidationError("Name is empty")
    if name in (".", "..") or "/" in name or "\\" in name:
        raise PathValidationError(f"Invalid name: {value!r}")
    if name.startswith("."):
        raise PathValidationError(f"Hidden names are not allowed: {value!r}")
    return name
