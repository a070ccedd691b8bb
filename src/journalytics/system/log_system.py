"""
Logging for Journalytics.

structlog on top of the stdlib logging module. Every module asks
LoggerFactory for a logger and emits dotted events
(`trade_store.loaded`, `report.written`, ...). The console renderer turns
the event prefix into a short section label; the optional log file gets
one JSON object per line.

Console output goes to stderr so that tables printed by the CLI on stdout
can be piped without log noise.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LOG_FILE = Path("logs/journalytics.log")

# strftime patterns for TimeStamper; "iso" is handled by structlog itself
_TIMESTAMP_FORMATS = {
    "iso": "iso",
    "compact": "%y%m%d-%H%M%S",
    "time": "%H:%M:%S",
}

# event prefix -> console section label
_SECTIONS = {
    "trade_store.": "Store",
    "report.": "Report",
    "analytics.": "Analytics",
    "config.": "Config",
}

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_CYAN = "\033[36m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"

_METADATA_KEYS = ("log_timestamp", "level", "event", "filename", "lineno", "logger")


class LoggingConfig(BaseModel):
    """Configuration for logging system.

    What each level shows:

    INFO (Default):
    - Trades loaded from a store (summary)
    - Reports and analytics built / written

    DEBUG:
    - Configuration file resolution

    WARNING:
    - Malformed trade fields coerced at the store boundary
    - Records skipped because a required field is missing

    Timestamp formats: "iso" (2024-01-05T10:15:00.123456Z),
    "compact" (240105-101500) or "time" (10:15:00).
    """

    level: LogLevel = Field(default="INFO", description="Minimum console log level")
    format: Literal["console", "json"] = Field(default="console", description="Console output format")
    timestamp_format: Literal["iso", "compact", "time"] = Field(
        default="compact",
        description="Timestamp format for log lines",
    )
    enable_file: bool = Field(default=False, description="Also write JSON lines to a log file")
    file_path: Path | None = Field(
        default=None,
        description="Path to log file (uses logs/journalytics.log if None)",
    )
    file_level: LogLevel = Field(default="WARNING", description="Minimum log level for file output")
    file_rotation: bool = Field(default=True, description="Rotate the log file when it gets too large")
    max_file_size_mb: int = Field(default=10, ge=1, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=3, ge=0, description="Number of rotated log files to keep")


def render_event(event: str, context: dict[str, Any], level: str, timestamp: str, source: str = "") -> str:
    """
    Render one console log line.

    Known event prefixes become a section label and the rest of the event
    name a title (`trade_store.field_coerced` -> `Store | Field Coerced`).
    Other events keep their name and use `source` (module:line) as the
    section. Without colors the line reads
    `240105-101500 | Report | Written | path=r.json`.
    """
    section, message = source, event
    for prefix, label in _SECTIONS.items():
        if event.startswith(prefix):
            section = label
            message = event[len(prefix) :].replace("_", " ").title()
            break

    parts = [f"{_DIM}{timestamp}{_RESET}"] if timestamp else []
    if section:
        parts.append(f"{_COLORS.get(level, _RESET)}{section}{_RESET}")
    parts.append(f"{_BOLD}{message}{_RESET}")

    for key, value in sorted(context.items()):
        if key.startswith("_") or key in _METADATA_KEYS:
            continue
        parts.append(f"{key}={_CYAN}{value}{_RESET}")

    return " | ".join(parts)


def _console_renderer(logger: Any, name: str, event_dict: dict[str, Any]) -> str:
    timestamp = event_dict.pop("log_timestamp", "")
    level = event_dict.pop("level", "info").upper()
    event = str(event_dict.pop("event", ""))
    filename = event_dict.pop("filename", "")
    lineno = event_dict.pop("lineno", "")
    event_dict.pop("logger", None)

    source = f"{Path(filename).stem}:{lineno}" if filename and lineno else ""
    return render_event(event, event_dict, level, timestamp, source)


class LoggerFactory:
    """
    Factory for creating and configuring structured loggers.

    Call configure() once at application startup (the CLI does this from
    system.yaml), then use get_logger() at module level. Loggers requested
    before configure() trigger a default configuration.

    Example:
        LoggerFactory.configure(LoggingConfig(level="DEBUG"))

        logger = LoggerFactory.get_logger()
        logger.info("trade_store.loaded", source="trades.csv", trades=120)
    """

    _config: LoggingConfig | None = None
    _configured: bool = False

    @classmethod
    def configure(cls, config: LoggingConfig | None = None) -> None:
        """
        Configure the logging system.

        Args:
            config: LoggingConfig instance. If None, uses default configuration.
        """
        if config is None:
            config = LoggingConfig()
        if config.enable_file and config.file_path is None:
            config.file_path = DEFAULT_LOG_FILE
        cls._config = config

        pre_chain = cls._pre_chain(config.timestamp_format)
        handlers = [cls._console_handler(config, pre_chain)]
        root_level = getattr(logging, config.level)
        if config.enable_file:
            handlers.append(cls._file_handler(config, pre_chain))
            root_level = min(root_level, getattr(logging, config.file_level))

        logging.basicConfig(level=root_level, handlers=handlers, force=True)

        processors = list(pre_chain)
        if config.format == "console":
            processors += [
                structlog.dev.set_exc_info,
                structlog.processors.ExceptionRenderer(structlog.dev.plain_traceback),  # type: ignore[arg-type]
            ]
        else:
            processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        cls._configured = True

    @staticmethod
    def _pre_chain(timestamp_format: str) -> list[Any]:
        """Processors shared by structlog and foreign stdlib records before rendering."""
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            # "log_timestamp" so it never clashes with a trade's own date fields
            structlog.processors.TimeStamper(fmt=_TIMESTAMP_FORMATS[timestamp_format], utc=True, key="log_timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
        ]

    @staticmethod
    def _console_handler(config: LoggingConfig, pre_chain: list[Any]) -> logging.Handler:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setLevel(getattr(logging, config.level))
        renderer: Any = _console_renderer if config.format == "console" else structlog.processors.JSONRenderer()
        handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
        return handler

    @staticmethod
    def _file_handler(config: LoggingConfig, pre_chain: list[Any]) -> logging.Handler:
        file_path = config.file_path or DEFAULT_LOG_FILE
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler: logging.Handler
        if config.file_rotation:
            handler = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=config.max_file_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        else:
            handler = logging.FileHandler(filename=str(file_path), encoding="utf-8")

        handler.setLevel(getattr(logging, config.file_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=pre_chain,
            )
        )
        return handler

    @classmethod
    def get_logger(cls, name: str | None = None):
        """
        Get a configured logger instance.

        Args:
            name: Logger name. Defaults to the calling module's __name__.

        Returns:
            structlog BoundLogger
        """
        if not cls._configured:
            cls.configure()
        if name is None:
            name = sys._getframe(1).f_globals.get("__name__", "journalytics")
        return structlog.get_logger(name)

    @classmethod
    def get_config(cls) -> LoggingConfig:
        """Get current logging configuration."""
        return cls._config if cls._config is not None else LoggingConfig()

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def reset(cls) -> None:
        """Drop handlers and structlog configuration (mainly for testing)."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.NOTSET)
        cls._config = None
        cls._configured = False
        structlog.reset_defaults()
