"""
Configuration.

Settings are read once (environment or YAML file) into an immutable object
and injected into the front ends; nothing re-reads the environment per call.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml

from .client import DEFAULT_BASE_URL, HttpClientConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

API_KEY_ENV = "FINANCIAL_DATASETS_API_KEY"
BASE_URL_ENV = "FINANCIAL_DATASETS_BASE_URL"
LOG_LEVEL_ENV = "FINANCIAL_DATASETS_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get(API_KEY_ENV) or None,
            base_url=env.get(BASE_URL_ENV) or DEFAULT_BASE_URL,
            log_level=(env.get(LOG_LEVEL_ENV) or "INFO").upper(),
        )

    @classmethod
    def from_yaml(cls, path: str | Path, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Load settings from a YAML mapping (api_key, base_url, log_level).

        Keys missing from the file fall back to the environment.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file must be a YAML mapping, got {type(data).__name__}")

        unknown = set(data) - {"api_key", "base_url", "log_level"}
        if unknown:
            logger.warning(f"Ignoring unknown settings in {path}: {sorted(unknown)}")

        defaults = cls.from_env(environ)
        return cls(
            api_key=data.get("api_key") or defaults.api_key,
            base_url=data.get("base_url") or defaults.base_url,
            log_level=str(data.get("log_level") or defaults.log_level).upper(),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def client_config(self) -> HttpClientConfig:
        if not self.has_api_key:
            raise ConfigurationError(f"{API_KEY_ENV} environment variable is not set")
        return HttpClientConfig(api_key=self.api_key, base_url=self.base_url)
