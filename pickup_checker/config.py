import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class NotificationConfig:
    sound: str = "minuet"
    timeout_seconds: float = 5.0
    max_concurrency: int = 4


@dataclass(frozen=True)
class StatusPageConfig:
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass(frozen=True)
class Config:
    location: str = ""
    models: tuple[str, ...] = ()
    search_interval_seconds: int = 10
    notify_endpoints: tuple[str, ...] = ()
    search_url: str | None = None
    notification: NotificationConfig = field(default_factory=NotificationConfig)
    status_page: StatusPageConfig = field(default_factory=StatusPageConfig)
    log_file: str | None = None
    log_level: str = "INFO"
    once: bool = False
    proxy_url: str | None = None


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pickup_checker",
        description="Watch in-store pickup availability and push alerts when models come in stock",
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Search interval in seconds (overrides config)",
    )
    parser.add_argument(
        "--location",
        default=None,
        help="Pickup location, e.g. a ZIP code (overrides config)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Path to write logs (default: stdout)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        default=False,
        help="Run a single search cycle and exit",
    )
    return parser.parse_args(argv)


def _string_list(yaml_data: dict, key: str) -> tuple[str, ...]:
    value = yaml_data.get(key) or []
    if isinstance(value, str) or not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list, got {type(value).__name__}")
    return tuple(str(v) for v in value)


def _mapping(yaml_data: dict, key: str) -> dict:
    value = yaml_data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def validate(config: Config) -> Config:
    if not config.location:
        raise ConfigError("'location' is required")
    if config.search_interval_seconds <= 0:
        raise ConfigError(
            f"'search_interval_seconds' must be positive, got {config.search_interval_seconds}"
        )
    if config.notification.max_concurrency <= 0:
        raise ConfigError("'notification.max_concurrency' must be positive")
    if config.notification.timeout_seconds <= 0:
        raise ConfigError("'notification.timeout_seconds' must be positive")
    if not config.models:
        logger.warning("No models configured; searches will not ask for any parts")
    if not config.notify_endpoints:
        logger.warning("No notify endpoints configured; in-stock alerts will only be logged")
    return config


def load_config(argv: list[str] | None = None) -> Config:
    args = parse_args(argv)

    # Load YAML config
    config_path = Path(args.config)
    yaml_data: dict = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}
    else:
        logger.warning("Config file %s not found, using defaults", config_path)

    if not isinstance(yaml_data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    # Search settings (YAML defaults, CLI overrides)
    location = str(yaml_data.get("location") or "")
    if args.location is not None:
        location = args.location
    interval = yaml_data.get("search_interval_seconds", 10)
    if args.interval is not None:
        interval = args.interval

    notification_data = _mapping(yaml_data, "notification")
    notification = NotificationConfig(
        sound=notification_data.get("sound", "minuet"),
        timeout_seconds=float(notification_data.get("timeout_seconds", 5.0)),
        max_concurrency=int(notification_data.get("max_concurrency", 4)),
    )

    status_data = _mapping(yaml_data, "status_page")
    status_page = StatusPageConfig(
        enabled=bool(status_data.get("enabled", False)),
        host=status_data.get("host", "127.0.0.1"),
        port=int(status_data.get("port", 8080)),
    )

    # Remaining settings: CLI overrides YAML overrides defaults
    log_file = args.log_file or yaml_data.get("log_file")
    log_level = args.log_level or yaml_data.get("log_level", "INFO")

    # Optional proxy
    proxy_url = _mapping(yaml_data, "proxy").get("url")

    try:
        interval = int(interval)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'search_interval_seconds' must be an integer, got {interval!r}") from exc

    return validate(
        Config(
            location=location,
            models=_string_list(yaml_data, "models"),
            search_interval_seconds=interval,
            notify_endpoints=_string_list(yaml_data, "notify_endpoints"),
            search_url=yaml_data.get("search_url"),
            notification=notification,
            status_page=status_page,
            log_file=log_file,
            log_level=log_level,
            once=args.once,
            proxy_url=proxy_url,
        )
    )
