"""Environment-driven settings for the gallery app."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

ENV_PREFIX = "ARTGALLERY_"

DEFAULT_BASE_URL = "https://api.artic.edu/api/v1"
DEFAULT_PAGE_SIZE = 12
DEFAULT_TIMEOUT = 10.0
DEFAULT_FIELDS: Tuple[str, ...] = (
    "id",
    "title",
    "place_of_origin",
    "artist_display",
    "inscriptions",
    "date_start",
    "date_end",
)


def _env(
    key: str, default: Optional[str] = None, *, environ: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    source = os.environ if environ is None else environ
    return source.get(f"{ENV_PREFIX}{key}", default)


def _env_int(key: str, fallback: int, *, environ: Optional[Mapping[str, str]] = None) -> int:
    value = _env(key, environ=environ)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _env_float(
    key: str, fallback: float, *, environ: Optional[Mapping[str, str]] = None
) -> float:
    value = _env(key, environ=environ)
    if value is None:
        return fallback
    try:
        return float(value)
    except ValueError:
        return fallback


def _env_flag(key: str, fallback: bool, *, environ: Optional[Mapping[str, str]] = None) -> bool:
    value = _env(key, environ=environ)
    if value is None:
        return fallback
    return value.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GalleryConfig:
    """Where to fetch pages from and how many rows each page holds."""

    base_url: str = DEFAULT_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE
    timeout: float = DEFAULT_TIMEOUT
    offline: bool = False
    fields: Tuple[str, ...] = field(default=DEFAULT_FIELDS)

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GalleryConfig":
        return cls(
            base_url=(_env("BASE_URL", environ=environ) or DEFAULT_BASE_URL).rstrip("/"),
            page_size=_env_int("PAGE_SIZE", DEFAULT_PAGE_SIZE, environ=environ),
            timeout=_env_float("TIMEOUT", DEFAULT_TIMEOUT, environ=environ),
            offline=_env_flag("OFFLINE", False, environ=environ),
        )


__all__ = ["GalleryConfig", "DEFAULT_BASE_URL", "DEFAULT_FIELDS", "DEFAULT_PAGE_SIZE"]
