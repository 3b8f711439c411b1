"""Telemetry for the indent guide engine, backed by telelog.

Records are ``event::<name>`` lines carrying key/value pairs. The package
emits these families:

``engine.setup`` -- the guard left ``pre_setup``
``state.<action>`` -- buffer cache bookkeeping, at debug level
``guard.failure`` -- the single report of a failed callback
``viewer.log`` -- log lines from the Textual viewer

Redraw callbacks fire constantly, so the default level is ``WARNING`` and the
per-line pass is never wrapped in a span.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "INDENT_GUIDE_"
ROOT_LOGGER = "indent_guide"
GUARD_LOGGER = "indent_guide.guard"
STATE_LOGGER = "indent_guide.state"

_LOGGERS: MutableMapping[str, Any] = {}
_CONFIG: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LogSettings:
    """The handful of telelog knobs this package exposes."""

    level: str = "WARNING"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: str = ""
    buffer_size: int = 0
    profiling: bool = False

    @classmethod
    def from_env(cls) -> "LogSettings":
        buffered = _env_flag("LOG_BUFFERED", False)
        return cls(
            level=(_env("LOG_LEVEL") or cls.level).upper(),
            console=not _env_flag("DISABLE_CONSOLE", False),
            color=not _env_flag("NO_COLOR", False),
            json=_env_flag("LOG_JSON", False),
            log_file=_env("LOG_FILE") or "",
            buffer_size=int(_env("LOG_BUFFER_SIZE") or "2048") if buffered else 0,
            profiling=_env_flag("PROFILE", False),
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        config.with_json_format(self.json)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffer_size > 0:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        config.with_profiling(self.profiling)
        return config


PRESETS: Dict[str, LogSettings] = {
    "development": LogSettings(level="DEBUG"),
    "production": LogSettings(
        console=False, log_file="indent_guide.log", buffer_size=2048
    ),
    "performance": LogSettings(
        level="DEBUG",
        console=False,
        json=True,
        log_file="indent_guide-performance.log",
        buffer_size=2048,
        profiling=True,
    ),
}


def preset_settings(preset: str) -> LogSettings:
    """Look up a preset; ``INDENT_GUIDE_LOG_FILE`` overrides its file path."""

    try:
        settings = PRESETS[preset.lower()]
    except KeyError:
        raise ValueError(f"Unknown preset '{preset}'.") from None
    log_file = _env("LOG_FILE")
    if log_file and settings.log_file:
        settings = replace(settings, log_file=log_file)
    return settings


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    settings: Optional[LogSettings] = None,
) -> None:
    """Swap the active telelog configuration and drop cached loggers.

    At most one of ``config`` (a ``telelog.Config``), ``preset`` or
    ``settings`` may be given. With none, settings are read from the
    ``INDENT_GUIDE_*`` environment.
    """

    global _CONFIG
    if sum(value is not None for value in (config, preset, settings)) > 1:
        raise ValueError("Provide only one of `config`, `preset` or `settings`.")

    if config is None:
        if preset is not None:
            settings = preset_settings(preset)
        config = (settings or LogSettings.from_env()).to_config()

    _CONFIG = config
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached ``telelog.Logger`` for ``name``."""

    global _CONFIG
    logger_name = name or ROOT_LOGGER
    if logger_name not in _LOGGERS:
        if _CONFIG is None:
            _CONFIG = LogSettings.from_env().to_config()
        _LOGGERS[logger_name] = tl.Logger.with_config(logger_name, _CONFIG)
    return _LOGGERS[logger_name]


def _pairs(data: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [
        (str(key), value if isinstance(value, str) else repr(value))
        for key, value in data.items()
    ]


def _emit(log: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    name = level.lower()
    structured = getattr(log, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(data))
        return
    plain = getattr(log, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {data}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


def state_event(action: str, buffer: int, **data: Any) -> None:
    """Debug record for buffer cache bookkeeping (``state.<action>``)."""

    record_event(
        f"state.{action}",
        level="debug",
        data={"buffer": buffer, **data},
        logger_name=STATE_LOGGER,
    )


def guard_failure(report: str) -> None:
    """The one error record written when a callback first fails."""

    context, _, trace = report.partition("\n")
    record_event(
        "guard.failure",
        level="error",
        data={
            "context": context,
            "traceback": trace,
            "notice": "An error occurred and following reports will be suppressed.",
        },
        logger_name=GUARD_LOGGER,
    )


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[None]:
    """Profile a block, optionally tracked as ``component``.

    ``metadata`` is attached as logger context for the duration of the block.
    An escaping exception is logged as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    context = {key: str(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        log.add_context(key, value)

    with ExitStack() as stack:
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        try:
            yield
        except Exception as exc:
            failure = {"span": name, "reason": str(exc), **context}
            _emit(log, "error", "span::fail", failure)
            raise
        finally:
            for key in context:
                log.remove_context(key)


__all__ = [
    "LogSettings",
    "PRESETS",
    "configure",
    "get_logger",
    "guard_failure",
    "preset_settings",
    "record_event",
    "span",
    "state_event",
]
