"""Gallery logging on telelog: one config, cached loggers, events and spans."""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

from artgallery.config import _env, _env_flag

tl = cast(Any, telelog)

DEFAULT_LOGGER_NAME = _env("LOGGER") or "artgallery"
PRESETS = ("development", "production", "performance")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _format(message: str, payload: Dict[str, Any]) -> str:
    pairs = " ".join(f"{key}={value!r}" for key, value in payload.items())
    return f"{message} | {pairs}" if pairs else message


def _log(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    getattr(logger, level)(_format(message, payload))


def _log_file(fallback: str) -> str:
    return _env("LOG_FILE") or fallback


def _build_preset_config(preset: str) -> Any:
    config = tl.Config()
    if preset == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
    elif preset == "production":
        # The terminal belongs to the Textual screen.
        config.with_min_level("INFO")
        config.with_console_output(False)
        config.with_file_output(_log_file("artgallery.log"))
    elif preset == "performance":
        config.with_min_level("DEBUG")
        config.with_console_output(False)
        config.with_json_format(True)
        config.with_file_output(_log_file("artgallery-performance.log"))
        config.with_profiling(True)
    else:
        raise ValueError(f"Unknown preset '{preset}'. Expected one of {PRESETS}.")
    return config


def _build_default_config() -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "WARNING").upper())
    console = not _env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR", False))
    if _env_flag("LOG_JSON", False):
        config.with_json_format(True)
    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Swap the active telelog config and drop cached loggers.

    ``config`` is an explicit ``telelog.Config``; ``preset`` names one of
    ``PRESETS``. Passing both is an error.
    """

    global _ACTIVE_CONFIG
    if config and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        config = _build_preset_config(preset.lower())
    _ACTIVE_CONFIG = config or _build_default_config()
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        if _ACTIVE_CONFIG is None:
            configure()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return _LOGGER_CACHE[logger_name]


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` appended as key=value pairs."""

    _log(get_logger(logger_name), level, f"event::{name}", dict(data or {}))


@dataclass
class SpanHandle:
    """Yielded by ``span``; metadata added here is logged when the span closes."""

    logger: Any
    span_name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def done(self) -> None:
        _log(self.logger, "debug", "span::done", {"span": self.span_name, **self.metadata})

    def fail(self, reason: str) -> None:
        payload = {"span": self.span_name, **self.metadata, "reason": reason}
        _log(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    component: str,
    logger_name: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block under ``component``; failures are logged and re-raised."""

    log = get_logger(logger_name)
    metadata = dict(metadata or {})
    context_keys = list(metadata)
    for key in context_keys:
        log.add_context(key, str(metadata[key]))

    with ExitStack() as stack:
        stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(logger=log, span_name=name, metadata=metadata)
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        else:
            handle.done()
        finally:
            for key in context_keys:
                log.remove_context(key)


__all__ = [
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
