"""
Configuration Loader
Builds a BillingConfig from a JSON file, BILLING_* variables and code
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from vendor_billing.config.billing_config import (
    BillingConfig,
    ENV_VAR_MAPPING,
    PartialBillingConfig,
)
from vendor_billing.config.config_validator import ConfigValidator
from vendor_billing.exceptions import ConfigError


ConfigSource = Union[Dict[str, Any], PartialBillingConfig]

_TRUTHY = ("true", "1", "yes")


class ConfigLoader:
    """
    Loads billing configuration

    Sources are layered file < environment < explicit values, and unset
    values never override a lower layer.
    """

    def __init__(self) -> None:
        self._validator = ConfigValidator()

    def from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Read a JSON object of config values

        A relative ``audit_log_path`` is taken relative to the file.

        Raises:
            ConfigError: If the file is missing or is not a JSON object
        """
        file_path = Path(path).resolve()
        if not file_path.exists():
            raise ConfigError(
                f"Configuration file not found: {file_path}",
                code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            values = json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {file_path}",
                code="CONFIG_PARSE_ERROR"
            ) from e

        if not isinstance(values, dict):
            raise ConfigError(
                f"Configuration file must contain a JSON object: {file_path}",
                code="CONFIG_PARSE_ERROR"
            )

        log_path = values.get("audit_log_path")
        if isinstance(log_path, str) and log_path and not Path(log_path).is_absolute():
            values["audit_log_path"] = str(file_path.parent / log_path)
        return values

    def from_environment(self) -> Dict[str, Any]:
        """Read the BILLING_* variables that are set and non-empty"""
        return {
            key: _parse_env_value(key, os.environ[name])
            for name, key in ENV_VAR_MAPPING.items()
            if os.environ.get(name)
        }

    def merge(self, *sources: ConfigSource) -> Dict[str, Any]:
        """Layer sources in order; later sources win and None is skipped"""
        merged: Dict[str, Any] = {}
        for source in sources:
            if isinstance(source, PartialBillingConfig):
                source = source.model_dump(exclude_none=True)
            merged.update({k: v for k, v in source.items() if v is not None})
        return merged

    def resolve(self, config: Dict[str, Any]) -> BillingConfig:
        """
        Validate merged values and fill in defaults

        Raises:
            ValidationError: If a value is malformed or out of range
        """
        self._validator.validate_or_raise(config)
        return BillingConfig(**config)

    def load(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[ConfigSource] = None,
    ) -> BillingConfig:
        """
        Load, merge and resolve configuration

        Args:
            file: Optional JSON configuration file
            env: Read BILLING_* environment variables
            config: Explicit values, highest priority

        Returns:
            Fully resolved BillingConfig
        """
        sources = []
        if file is not None:
            sources.append(self.from_file(file))
        if env:
            sources.append(self.from_environment())
        if config is not None:
            sources.append(config)
        return self.resolve(self.merge(*sources))


def _parse_env_value(key: str, value: str) -> Any:
    """Coerce a variable to the type of the config field it feeds"""
    annotation = BillingConfig.model_fields[key].annotation
    if annotation is bool:
        return value.strip().lower() in _TRUTHY
    if annotation is int:
        try:
            return int(value)
        except ValueError:
            # Left as text so validation reports it
            return value
    return value
