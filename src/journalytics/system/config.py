"""
System configuration for Journalytics.

One configuration for the whole engine, loaded from YAML and merged over
built-in defaults.

Search order for the configuration file:
1. Explicit path passed to SystemConfig.load()
2. $JOURNALYTICS_CONFIG
3. config/system.yaml (relative to the working directory)

Values of the form ${VAR} or ${VAR:-default} are substituted from the
environment before the sections are built.
"""

import os
import re
from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Literal

import yaml

from journalytics.system.log_system import LoggerFactory
from journalytics.system.log_system import LoggingConfig as LoggerConfig

DEFAULT_CONFIG_PATH = Path("config/system.yaml")
CONFIG_ENV_VAR = "JOURNALYTICS_CONFIG"

logger = LoggerFactory.get_logger()

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

# Words accepted for booleans in configuration files and trade records
TRUE_WORDS = frozenset({"1", "true", "yes", "y", "t"})
FALSE_WORDS = frozenset({"0", "false", "no", "n", "f"})


def as_bool(value: Any, key: str) -> bool:
    """
    Read a boolean setting that may arrive as text (e.g. from ${VAR}).

    Raises:
        ValueError: If the value is not a recognizable true/false word
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in TRUE_WORDS:
        return True
    if text in FALSE_WORDS:
        return False
    raise ValueError(f"{key} must be true or false, got {value!r}")


def as_int(value: Any, key: str) -> int:
    """
    Read an integer setting that may arrive as text.

    Raises:
        ValueError: If the value is not a whole number
    """
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}")


@dataclass
class AnalyticsConfig:
    """Tunable windows for the analytics builders."""

    rolling_window: int = 10
    heatmap_days: int = 90
    top_mistakes: int = 5
    annualization_factor: int = 252

    def __post_init__(self) -> None:
        if self.rolling_window < 1:
            raise ValueError(f"rolling_window must be >= 1, got {self.rolling_window}")
        if self.heatmap_days < 1:
            raise ValueError(f"heatmap_days must be >= 1, got {self.heatmap_days}")
        if self.top_mistakes < 1:
            raise ValueError(f"top_mistakes must be >= 1, got {self.top_mistakes}")
        if self.annualization_factor < 1:
            raise ValueError(f"annualization_factor must be >= 1, got {self.annualization_factor}")


@dataclass
class ScoreRange:
    """Linear normalization bounds for one composite score dimension."""

    low: float
    high: float

    def __post_init__(self) -> None:
        if self.high <= self.low:
            raise ValueError(f"score range high must exceed low, got [{self.low}, {self.high}]")


def _default_score_ranges() -> dict[str, ScoreRange]:
    return {
        "win_rate": ScoreRange(20, 85),
        "profit_factor": ScoreRange(0.5, 3),
        "expectancy": ScoreRange(-300, 500),
        "sharpe": ScoreRange(-2, 3),
        "consistency": ScoreRange(0, 100),
        "payoff": ScoreRange(0.5, 4),
    }


@dataclass
class RiskSettings:
    """Account risk limits used by the risk command (percent of capital)."""

    capital: Decimal = Decimal("25000")
    max_daily_drawdown_pct: Decimal = Decimal("2")
    max_total_drawdown_pct: Decimal = Decimal("10")
    profit_target_pct: Decimal = Decimal("10")
    consistency_pct: Decimal = Decimal("40")


@dataclass
class RulesSettings:
    """Discipline rules; zero disables a numeric limit."""

    trading_days: list[str] = field(default_factory=lambda: ["Mon", "Tue", "Wed", "Thu", "Fri"])
    hours_enabled: bool = True
    hours_from: str = "09:00"
    hours_to: str = "16:00"
    max_trades_per_day: int = 0
    max_loss_per_trade: Decimal = Decimal("0")
    max_loss_per_day: Decimal = Decimal("0")


@dataclass
class OutputConfig:
    """Where exported reports are written."""

    reports_dir: str = "output/reports"
    timestamp_format: str = "%Y%m%d_%H%M%S"


@dataclass
class LoggingConfig:
    """Logging section of system.yaml."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json"] = "console"
    timestamp_format: Literal["iso", "compact", "time"] = "compact"
    enable_file: bool = False
    file_path: str = "logs/journalytics.log"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the log_system LoggingConfig consumed by LoggerFactory."""
        return LoggerConfig(
            level=self.level,
            format=self.format,
            timestamp_format=self.timestamp_format,
            enable_file=self.enable_file,
            file_path=Path(self.file_path) if self.file_path else None,
            file_level=self.file_level,
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Complete system configuration."""

    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    score_ranges: dict[str, ScoreRange] = field(default_factory=_default_score_ranges)
    risk: RiskSettings = field(default_factory=RiskSettings)
    rules: RulesSettings = field(default_factory=RulesSettings)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def score_bounds(self) -> dict[str, tuple[Decimal, Decimal]]:
        """Score ranges as (low, high) Decimal pairs for build_composite_score."""
        return {name: (Decimal(str(r.low)), Decimal(str(r.high))) for name, r in self.score_ranges.items()}

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration from YAML, falling back to built-in defaults.

        Args:
            path: Explicit configuration file. When None, $JOURNALYTICS_CONFIG
                  and then config/system.yaml are tried.

        Returns:
            SystemConfig with file values merged over defaults

        Raises:
            ValueError: If the file contents are not a mapping or a value is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        config_path = Path(path)
        if not config_path.exists():
            logger.debug("config.defaults_used", path=str(config_path))
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f)

        logger.debug("config.loaded", path=str(config_path))
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping, got {type(data).__name__}")

        try:
            return cls._from_dict(_substitute_env_vars(data))
        except (TypeError, InvalidOperation) as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}")

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build configuration from a (possibly partial) dictionary."""
        analytics = _section(AnalyticsConfig, data.get("analytics", {}))

        merged_ranges: dict[str, Any] = {
            name: {"low": r.low, "high": r.high} for name, r in _default_score_ranges().items()
        }
        merged_ranges = _deep_merge(merged_ranges, data.get("score_ranges", {}))
        unknown = set(merged_ranges) - set(_default_score_ranges())
        if unknown:
            raise ValueError(f"Unknown score dimensions: {sorted(unknown)}")
        score_ranges = {name: ScoreRange(float(v["low"]), float(v["high"])) for name, v in merged_ranges.items()}

        return cls(
            analytics=analytics,
            score_ranges=score_ranges,
            risk=_section(RiskSettings, data.get("risk", {})),
            rules=_section(RulesSettings, data.get("rules", {})),
            output=_section(OutputConfig, data.get("output", {})),
            logging=_section(LoggingConfig, data.get("logging", {})),
        )


def _section(section_cls: type, values: dict[str, Any] | None) -> Any:
    """
    Build one section dataclass, converting text values to the declared field type.

    Environment substitution always yields strings, so `rolling_window: ${WIN:-10}`
    arrives as "10" and `hours_enabled: ${HOURS}` as "false".
    """
    if values is None:
        values = {}
    if not isinstance(values, dict):
        raise TypeError(f"{section_cls.__name__} must be a mapping, got {type(values).__name__}")

    kinds = {f.name: f.type for f in fields(section_cls)}
    kwargs: dict[str, Any] = {}
    for key, value in values.items():
        kind = kinds.get(key)
        if kind is bool:
            value = as_bool(value, key)
        elif kind is int:
            value = as_int(value, key)
        elif kind is Decimal:
            value = Decimal(str(value))
        kwargs[key] = value
    return section_cls(**kwargs)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base; override wins on conflict."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} and ${VAR:-default} in every string of a nested structure."""
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config() -> SystemConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _system_config
    if _system_config is None:
        _system_config = SystemConfig.load()
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force a reload from disk (used by the CLI and tests)."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
