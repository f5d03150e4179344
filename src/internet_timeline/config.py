from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv


def repo_root() -> Path:
    # Assumes this file lives at: repo/src/internet_timeline/config.py
    return Path(__file__).resolve().parents[2]


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


DEFAULT_MANDATORY_FILE = "data/historical_events.json"
DEFAULT_OPTIONAL_FILES = [
    "data/statistics.json",
    "data/companies.json",
    "data/social_media.json",
    "data/policies.json",
    "data/infrastructure.json",
]


@dataclass(frozen=True)
class AppConfig:
    env: str
    base_url: str
    mandatory_file: str
    optional_files: List[str]
    retry_attempts: int = 3
    retry_delay: float = 1.0
    template_timeout: float = 10.0
    template_poll_interval: float = 0.1
    templates_dir: Optional[Path] = None
    log_level: str = "INFO"
    settings: Optional[Dict[str, Any]] = None

    @property
    def data_files(self) -> List[str]:
        return [self.mandatory_file, *self.optional_files]


def _positive(value: Any, key: str, cast: type) -> Any:
    try:
        v = cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"configs/settings.yaml: {key} must be a number, got {value!r}")
    if v <= 0:
        raise ValueError(f"configs/settings.yaml: {key} must be > 0, got {v}")
    return v


def config_from_settings(settings: Dict[str, Any]) -> AppConfig:
    app = settings.get("app", {}) or {}
    data = settings.get("data", {}) or {}
    retry = settings.get("retry", {}) or {}
    templates = settings.get("templates", {}) or {}

    optional = data.get("optional", DEFAULT_OPTIONAL_FILES)
    if not isinstance(optional, list) or not all(isinstance(f, str) for f in optional):
        raise ValueError("configs/settings.yaml: data.optional must be a list of strings")

    mandatory = data.get("mandatory", DEFAULT_MANDATORY_FILE)
    if not isinstance(mandatory, str) or not mandatory.strip():
        raise ValueError("configs/settings.yaml: data.mandatory must be a non-empty string")

    env = os.getenv("APP_ENV", app.get("env", "local"))
    base_url = os.getenv("TIMELINE_BASE_URL", data.get("base_url", "http://localhost:8000/"))
    log_level = os.getenv("TIMELINE_LOG_LEVEL", app.get("log_level", "INFO"))

    templates_dir = templates.get("dir")

    return AppConfig(
        env=str(env),
        base_url=str(base_url),
        mandatory_file=mandatory.strip(),
        optional_files=[f.strip() for f in optional if f.strip()],
        retry_attempts=_positive(retry.get("attempts", 3), "retry.attempts", int),
        retry_delay=_positive(retry.get("delay_seconds", 1.0), "retry.delay_seconds", float),
        template_timeout=_positive(templates.get("timeout_seconds", 10.0), "templates.timeout_seconds", float),
        template_poll_interval=_positive(
            templates.get("poll_interval_seconds", 0.1), "templates.poll_interval_seconds", float
        ),
        templates_dir=(repo_root() / str(templates_dir)) if templates_dir else None,
        log_level=str(log_level).upper(),
        settings=settings,
    )


def load_config(settings_path: Optional[Path] = None) -> AppConfig:
    load_dotenv(repo_root() / ".env")

    settings_path = settings_path or (repo_root() / "configs" / "settings.yaml")
    return config_from_settings(load_yaml(settings_path))
