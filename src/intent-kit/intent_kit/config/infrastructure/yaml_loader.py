"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from intent_kit.config.domain.config import IntentKitConfig
from intent_kit.config.domain.observer import ConfigObserver
from intent_kit.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from intent_kit.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns an IntentKitConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> IntentKitConfig:
        """
        Load, interpolate, validate, and return an IntentKitConfig from a YAML file.

        An empty file yields the default configuration.

        Raises:
            ConfigLoadError: if the file cannot be read or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references without a default
                are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        cfg = _build_config(resolved=interpolate(raw))
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(path=str(path))
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason="invalid YAML") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(path=path, reason="top-level value must be a mapping")
    return raw


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_config(resolved: Any) -> IntentKitConfig:
    try:
        return IntentKitConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def _emit_warnings(cfg: IntentKitConfig, observer: ConfigObserver) -> None:
    if not cfg.donation.is_enabled:
        observer.config_donation_disabled_warning()
