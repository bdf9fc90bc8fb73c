"""Persisted provider settings.

Settings live in a small YAML file (``~/.scriptalchemist/settings.yaml`` unless
``SCRIPTALCHEMIST_SETTINGS`` or ``--settings`` point elsewhere). Every key can
be overridden by the upper-cased environment variable of the same name, e.g.
``AI_API_KEY``.

The store is read when the application builds an adapter; adapters only ever
see the resulting ``ProviderConfig``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_ENV = "SCRIPTALCHEMIST_SETTINGS"
DEFAULT_SETTINGS_PATH = Path.home() / ".scriptalchemist" / "settings.yaml"

DEFAULT_PROVIDER = "openai"

KNOWN_KEYS = (
    "ai_provider",
    "ai_api_key",
    "ai_api_url",
    "ai_model",
    "ai_timeout",
    "gemini_api_key",
    "analysis_strict",
)

SECRET_KEYS = ("ai_api_key", "gemini_api_key")


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    api_key: str
    api_url: Optional[str] = None
    model: Optional[str] = None
    timeout: Optional[float] = None


def mask_secret(value: Optional[str]) -> str:
    """Return a display-safe version of an API key."""
    if not value:
        return ""
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


class SettingsStore:
    """Key-value settings backed by a YAML file with environment overrides."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        chosen = path or os.getenv(SETTINGS_ENV) or DEFAULT_SETTINGS_PATH
        self.path = Path(chosen).expanduser()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Settings file {self.path} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {self.path} must contain a mapping")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(data, allow_unicode=True, sort_keys=True), encoding="utf-8")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        env_value = os.getenv(key.upper())
        if env_value:
            return env_value
        value = self._read().get(key)
        if value is None or value == "":
            return default
        return str(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return value.strip().lower() in ("true", "1", "yes", "on")

    def set(self, key: str, value: str) -> None:
        if key not in KNOWN_KEYS:
            raise ConfigurationError(f"Unknown setting: {key}. Known settings: {', '.join(KNOWN_KEYS)}")
        if key == "ai_provider":
            from .adapters.factory import PROVIDERS

            value = value.strip().lower()
            if value not in PROVIDERS:
                raise ConfigurationError(
                    f"Unsupported AI provider: {value}. Choose one of: {', '.join(PROVIDERS)}"
                )
        data = self._read()
        data[key] = value
        self._write(data)
        logger.info("Saved setting %s to %s", key, self.path)

    def unset(self, key: str) -> bool:
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        logger.info("Removed setting %s from %s", key, self.path)
        return True

    def as_dict(self, masked: bool = True) -> Dict[str, str]:
        """Effective values of all known keys (environment overrides applied)."""
        out: Dict[str, str] = {}
        for key in KNOWN_KEYS:
            value = self.get(key)
            if value is None:
                continue
            out[key] = mask_secret(value) if masked and key in SECRET_KEYS else value
        return out


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"ai_timeout must be a number of seconds, got {raw!r}")
    return value if value > 0 else None


def load_provider_config(
    store: SettingsStore, provider: Optional[str] = None, model: Optional[str] = None
) -> ProviderConfig:
    """Build a ProviderConfig from the settings store.

    ``provider`` and ``model`` override the stored values (CLI flags). A
    missing API key is not an error here: adapters refuse to send requests
    without one, so the failure surfaces at the step that needs the key.
    """
    chosen = (provider or store.get("ai_provider") or DEFAULT_PROVIDER).strip().lower()
    if chosen == "genai":
        api_key = store.get("gemini_api_key") or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""
    else:
        api_key = store.get("ai_api_key") or ""
    config = ProviderConfig(
        provider=chosen,
        api_key=api_key,
        api_url=store.get("ai_api_url"),
        model=model or store.get("ai_model"),
        timeout=_parse_timeout(store.get("ai_timeout")),
    )
    logger.debug("Loaded provider config: provider=%s model=%s key=%s", config.provider, config.model, mask_secret(api_key))
    return config
