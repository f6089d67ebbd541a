"""Configuration loader: YAML file with environment variable fallbacks."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_BIN_DIR = "./bin"
DEFAULT_CONFIG_PATH = "healthcheck.config"


@dataclass
class OutputConfig:
    bin_dir: str = DEFAULT_BIN_DIR
    config_path: str = DEFAULT_CONFIG_PATH


@dataclass
class SafetyConfig:
    protected_paths: list[str] = field(default_factory=list)  # appended to the platform table


@dataclass
class AppConfig:
    output: OutputConfig = field(default_factory=OutputConfig)
    safety: SafetyConfig = field(default_factory=SafetyConfig)


def _get_config_path() -> Path:
    override = os.environ.get("HEALTHCHECK_CONFIG")
    if override:
        return Path(os.path.expanduser(override))
    return Path.home() / ".healthcheck" / "config.yaml"


def _env_protected_paths() -> list[str]:
    raw = os.environ.get("HEALTHCHECK_PROTECTED_PATHS", "")
    return [p.strip() for p in raw.split(os.pathsep) if p.strip()]


def load_config(config_path: Path | None = None) -> AppConfig:
    raw: dict[str, Any] = {}
    path = config_path or _get_config_path()

    if path.exists():
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a YAML mapping")

    output_raw = raw.get("output") or {}
    if not isinstance(output_raw, dict):
        raise ValueError(f"'output' in {path} must be a mapping")
    bin_dir = output_raw.get("bin_dir") or os.environ.get("HEALTHCHECK_BIN_DIR", DEFAULT_BIN_DIR)
    conf_path = output_raw.get("config_path") or os.environ.get("HEALTHCHECK_CONFIG_PATH", DEFAULT_CONFIG_PATH)

    safety_raw = raw.get("safety") or {}
    if not isinstance(safety_raw, dict):
        raise ValueError(f"'safety' in {path} must be a mapping")
    protected_raw = safety_raw.get("protected_paths") or []
    if not isinstance(protected_raw, list):
        raise ValueError(f"'safety.protected_paths' in {path} must be a list of absolute paths")
    protected_paths = [os.path.expanduser(str(p)) for p in protected_raw] + _env_protected_paths()
    for p in protected_paths:
        if not os.path.isabs(p):
            raise ValueError(f"Protected path must be absolute: {p!r}")

    return AppConfig(
        output=OutputConfig(bin_dir=str(bin_dir), config_path=str(conf_path)),
        safety=SafetyConfig(protected_paths=protected_paths),
    )
