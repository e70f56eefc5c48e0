"""Structured logging for the editing core, backed by telelog.

Callers use three entry points: :func:`record_event` for one-off facts
(``event::save_requested``), :func:`span` to time and tag a block of work,
and :func:`configure` to pick a log setup at startup.  Loggers are created
lazily and rebuilt whenever the setup changes.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "JOT_ENGINE_"
ROOT_LOGGER = "jot_engine"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class LogSettings:
    """Everything that shapes the telelog configuration."""

    level: str = "WARNING"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: str = ""
    buffer_size: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", self.level.upper())
        if self.buffer_size < 0:
            raise ValueError("buffer_size cannot be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LogSettings":
        """Read ``JOT_ENGINE_LOG_*`` overrides on top of the defaults."""

        env = os.environ if environ is None else environ

        def flag(name: str) -> bool:
            return env.get(f"{ENV_PREFIX}{name}", "").lower() in _TRUTHY

        buffer_size = 0
        if flag("LOG_BUFFERED"):
            buffer_size = int(env.get(f"{ENV_PREFIX}LOG_BUFFER_SIZE", "2048"))
        return cls(
            level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "WARNING"),
            console=not flag("DISABLE_CONSOLE"),
            color=not flag("NO_COLOR"),
            json=flag("LOG_JSON"),
            log_file=env.get(f"{ENV_PREFIX}LOG_FILE", ""),
            buffer_size=buffer_size,
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffer_size:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        return config


PRESETS: Mapping[str, LogSettings] = {
    "development": LogSettings(level="DEBUG"),
    "production": LogSettings(
        level="INFO", console=False, log_file="jot_engine.log", buffer_size=2048
    ),
    "quiet": LogSettings(level="ERROR", console=False),
}

_loggers: MutableMapping[str, Any] = {}
_settings: Optional[LogSettings] = None
_config: Optional[Any] = None


def preset_settings(name: str, *, log_file: Optional[str] = None) -> LogSettings:
    """Look up a named preset; ``log_file`` overrides its file target."""

    try:
        settings = PRESETS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown log preset '{name}' (expected one of {sorted(PRESETS)})"
        ) from None
    if log_file:
        settings = replace(settings, log_file=log_file)
    return settings


def configure(
    settings: Optional[LogSettings] = None, *, preset: Optional[str] = None
) -> LogSettings:
    """Adopt a log setup and drop every cached logger.

    With no arguments the setup is read from the environment.  ``preset``
    names an entry of :data:`PRESETS`; ``JOT_ENGINE_LOG_FILE`` still
    redirects its file output.
    """

    global _settings, _config
    if settings is not None and preset is not None:
        raise ValueError("Provide either settings or preset, not both.")
    if preset is not None:
        log_file = os.environ.get(f"{ENV_PREFIX}LOG_FILE")
        settings = preset_settings(preset, log_file=log_file)
    elif settings is None:
        settings = LogSettings.from_env()
    _config = settings.to_config()
    _settings = settings
    _loggers.clear()
    return settings


def active_settings() -> LogSettings:
    if _settings is None:
        return configure()
    return _settings


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached ``telelog.Logger`` for ``name``."""

    if _config is None:
        configure()
    logger_name = name or ROOT_LOGGER
    logger = _loggers.get(logger_name)
    if logger is None:
        logger = _loggers[logger_name] = tl.Logger.with_config(logger_name, _config)
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _emit(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(k), _text(v)) for k, v in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit an ``event::<name>`` record carrying ``data`` as fields."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; metadata added here lands on the failure record."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, str] = {"span": self.name, **self.metadata, "reason": reason}
        if self.component:
            payload["component"] = self.component
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name`` and tag its records with ``metadata``.

    ``component`` additionally wraps the block in telelog component
    tracking.  An exception escaping the block is logged through
    :meth:`SpanHandle.fail` and re-raised.
    """

    logger = get_logger(logger_name)
    tags = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=logger, name=name, component=component, metadata=dict(tags)
    )
    with ExitStack() as stack:
        for key, value in tags.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component:
            stack.enter_context(logger.track_component(component))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "LogSettings",
    "PRESETS",
    "SpanHandle",
    "active_settings",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "span",
]
