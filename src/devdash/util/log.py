"""Structured logging with tagged loggers, timing and rotating log files.

Every module creates its own tagged logger::

    log = Log.create({"service": "status.tools"})
    log.info("poll finished", {"tool": "docker", "duration": 12})

Output goes to stderr, to a file in the devdash log directory, or both,
depending on :meth:`Log.configure`.
"""

import json
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from ..core.global_paths import GlobalPath

KEEP_LOG_FILES = 10


class LogLevel(str, Enum):
    """Log severity levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value: str | None) -> "LogLevel":
        if value is None:
            return cls.INFO
        text = value.strip().lower()
        if text == "warning":
            text = "warn"
        for level in cls:
            if level.value.lower() == text:
                return level
        raise ValueError(f"invalid log level: {value}")


class LogFormat(str, Enum):
    """Log output format."""

    KV = "kv"
    JSON = "json"
    PRETTY = "pretty"

    @classmethod
    def parse(cls, value: str | None) -> "LogFormat":
        if value is None:
            return cls.KV
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"invalid log format: {value}") from None


LEVEL_PRIORITY = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}


@dataclass
class LogConfig:
    """Process-wide logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.KV
    console: bool = False
    file: bool = False
    log_file_path: Optional[str] = None
    _file_handle: Optional[TextIO] = None


_config = LogConfig()
_last_timestamp = time.time()


@dataclass
class LogTimer:
    """Measures an operation and logs its duration when stopped."""
    logger: 'Logger'
    message: str
    extra: Dict[str, Any]
    start_time: float = field(default_factory=time.time)

    def stop(self) -> None:
        duration_ms = int((time.time() - self.start_time) * 1000)
        self.logger.debug(self.message, {**self.extra, "status": "completed", "duration": duration_ms})

    def __enter__(self) -> 'LogTimer':
        return self

    def __exit__(self, *args) -> None:
        self.stop()


class Logger:
    """Structured logger with tags."""

    def __init__(self, tags: Optional[Dict[str, Any]] = None):
        self.tags = tags or {}

    def _enabled(self, level: LogLevel) -> bool:
        return LEVEL_PRIORITY[level] >= LEVEL_PRIORITY[_config.level]

    def _format_error(self, error: BaseException, depth: int = 0) -> str:
        text = str(error) or error.__class__.__name__
        if error.__cause__ and depth < 10:
            text += " Caused by: " + self._format_error(error.__cause__, depth + 1)
        return text

    def _normalize(self, value: Any) -> Any:
        if isinstance(value, BaseException):
            return self._format_error(value)
        if value is None or isinstance(value, (dict, list, tuple, int, float, bool)):
            return value
        if isinstance(value, Enum):
            return value.value
        return str(value)

    def _value(self, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, (dict, list, tuple)):
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
        text = str(value)
        if text == "" or "=" in text or any(ch.isspace() for ch in text):
            return json.dumps(text, ensure_ascii=False)
        return text

    def _payload(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> dict[str, Any]:
        global _last_timestamp

        now = time.time()
        delta_ms = int((now - _last_timestamp) * 1000)
        _last_timestamp = now

        merged = {**self.tags, **(extra or {})}
        return {
            "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "delta_ms": delta_ms,
            "level": level.value.lower(),
            "msg": self._normalize(message),
            **{k: self._normalize(v) for k, v in merged.items() if v is not None},
        }

    def _render(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> str:
        payload = self._payload(level, message, extra)
        if _config.format == LogFormat.JSON:
            return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str) + "\n"

        pairs = " ".join(
            f"{k}={self._value(v)}"
            for k, v in payload.items()
            if k not in {"time", "delta_ms", "level", "msg"}
        )
        if _config.format == LogFormat.PRETTY:
            text = str(payload.get("msg") or "")
            suffix = f" ({pairs})" if pairs else ""
            return f"{payload['time']} {level.value} {text}{suffix} +{payload['delta_ms']}ms\n"

        parts = [
            str(payload["time"]),
            f"+{payload['delta_ms']}ms",
            f"level={payload['level']}",
            f"msg={self._value(payload.get('msg'))}",
            pairs,
        ]
        return " ".join(part for part in parts if part) + "\n"

    def _emit(self, level: LogLevel, message: Any, extra: Optional[Dict[str, Any]]) -> None:
        if not self._enabled(level):
            return
        line = self._render(level, message, extra)
        if _config.console:
            sys.stderr.write(line)
            sys.stderr.flush()
        if _config.file and _config._file_handle:
            _config._file_handle.write(line)
            _config._file_handle.flush()

    def debug(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.DEBUG, message, extra)

    def info(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.INFO, message, extra)

    def warn(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.WARN, message, extra)

    def error(self, message: Any = None, extra: Optional[Dict[str, Any]] = None) -> None:
        self._emit(LogLevel.ERROR, message, extra)

    def tag(self, key: str, value: Any) -> 'Logger':
        self.tags[key] = value
        return self

    def clone(self) -> 'Logger':
        return Logger(tags=self.tags.copy())

    def time(self, message: str, extra: Optional[Dict[str, Any]] = None) -> LogTimer:
        """Start a timer; the completion line is logged at debug level."""
        extra = extra or {}
        self.debug(message, {**extra, "status": "started"})
        return LogTimer(logger=self, message=message, extra=extra)


class Log:
    """Logger factory and process-wide sink configuration."""

    _loggers: Dict[str, Logger] = {}

    @classmethod
    def create(cls, tags: Optional[Dict[str, Any]] = None) -> Logger:
        """Create a logger, cached by its ``service`` tag when one is given."""
        tags = tags or {}
        service = tags.get("service")
        if not isinstance(service, str) or not service:
            return Logger(tags=tags)

        logger = cls._loggers.get(service)
        if logger is None:
            logger = Logger(tags=tags)
            cls._loggers[service] = logger
        return logger

    @classmethod
    def configure(
        cls,
        *,
        level: LogLevel | None = None,
        format: LogFormat | None = None,
        console: bool | None = None,
        file: bool | None = None,
        dev: bool = False,
    ) -> None:
        """Configure level, format and sinks. Reopens the log file."""
        if level is not None:
            _config.level = level
        if format is not None:
            _config.format = format
        if console is not None:
            _config.console = console
        _config.file = True if file is None else file

        cls.close()
        if not _config.file:
            _config.log_file_path = None
            return

        log_dir = Path(GlobalPath.log())
        log_dir.mkdir(parents=True, exist_ok=True)
        cls._cleanup_logs(log_dir)
        if dev:
            log_path = log_dir / "dev.log"
        else:
            stamp = datetime.now().isoformat().split(".")[0].replace(":", "")
            log_path = log_dir / f"{stamp}.log"

        _config.log_file_path = str(log_path)
        _config._file_handle = log_path.open("w", encoding="utf-8")

    @classmethod
    def file(cls) -> str:
        return _config.log_file_path or ""

    @classmethod
    def _cleanup_logs(cls, log_dir: Path) -> None:
        """Keep only the newest timestamped log files."""
        log_files = sorted(
            log_dir.glob("????-??-??T??????.log"),
            key=lambda p: p.stat().st_mtime,
        )
        for old_file in log_files[:-KEEP_LOG_FILES]:
            old_file.unlink(missing_ok=True)

    @classmethod
    def close(cls) -> None:
        if _config._file_handle:
            _config._file_handle.close()
            _config._file_handle = None
