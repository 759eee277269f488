"""Configuration loading from CLI args, env vars, and optional YAML file."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from klog_query.reader import DEFAULT_EXTENSIONS

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "./data"
DEFAULT_DAILY_TARGET_HOURS = 8.0


@dataclass(frozen=True)
class Config:
    data_dir: str = DEFAULT_DATA_DIR
    daily_target_hours: float = DEFAULT_DAILY_TARGET_HOURS
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    log_level: str = "WARNING"
    default_tags: tuple[str, ...] = field(default_factory=tuple)


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def _env_float(name: str, fallback: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return fallback
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return fallback


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config: CLI args over env vars over YAML over defaults."""
    data_dir = (
        getattr(cli_args, "data_dir", None)
        or os.environ.get("KLOG_DATA_DIR")
        or yaml_data.get("data_dir", DEFAULT_DATA_DIR)
    )
    target = _env_float(
        "KLOG_DAILY_TARGET_HOURS",
        float(yaml_data.get("daily_target_hours", DEFAULT_DAILY_TARGET_HOURS)),
    )
    log_level = "DEBUG" if getattr(cli_args, "verbose", False) else yaml_data.get("log_level", "WARNING")

    return Config(
        data_dir=data_dir,
        daily_target_hours=target,
        extensions=tuple(yaml_data.get("extensions", DEFAULT_EXTENSIONS)),
        log_level=str(log_level).upper(),
        default_tags=tuple(yaml_data.get("default_tags", ())),
    )
