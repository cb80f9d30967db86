"""Runtime logging bootstrap helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from ..core.config import Config
from ..util.log import Log, LogFormat, LogLevel

LogMode = Literal["cli", "watch"]


@dataclass(frozen=True)
class LogSettings:
    level: LogLevel
    format: LogFormat
    console: bool
    file: bool
    dev_file: bool


def resolve_log_settings(
    config: Config,
    *,
    mode: LogMode,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
) -> LogSettings:
    """Explicit arguments win over config, config wins over mode defaults."""
    log = config.logging

    lv = LogLevel.parse(level or (log.level if log else None))
    fm = LogFormat.parse(format or (log.format if log else None))

    use_console = console
    if use_console is None:
        use_console = log.console if log and log.console is not None else False

    use_file = file
    if use_file is None:
        # one-shot commands stay quiet on disk unless configured otherwise
        use_file = log.file if log and log.file is not None else mode == "watch"

    use_dev = log.dev_file if log and log.dev_file is not None else False

    return LogSettings(level=lv, format=fm, console=use_console, file=use_file, dev_file=use_dev)


def bootstrap_logging(
    config: Config,
    *,
    mode: LogMode,
    level: Optional[str] = None,
    format: Optional[str] = None,
    console: Optional[bool] = None,
    file: Optional[bool] = None,
) -> LogSettings:
    """Resolve settings and configure the process logger."""
    settings = resolve_log_settings(
        config,
        mode=mode,
        level=level,
        format=format,
        console=console,
        file=file,
    )
    Log.configure(
        level=settings.level,
        format=settings.format,
        console=settings.console,
        file=settings.file,
        dev=settings.dev_file,
    )
    return settings
