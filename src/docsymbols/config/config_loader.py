"""
Configuration loader for docsymbols.

This module provides functionality for loading and managing
configuration settings.

"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from docsymbols.config.config_schema import TEST_DEBOUNCE_DELAY, AppConfigSchema, SymbolsConfigSchema
from docsymbols.errors import DocSymbolsError

logger = logging.getLogger(__name__)

TEST_MODE_ENV_VAR = "DOCSYMBOLS_TEST_MODE"
LOCAL_CONFIG_NAME = ".docsymbols.yml"


class ConfigError(DocSymbolsError):
	"""Exception raised for configuration errors."""


class ConfigParsingError(ConfigError):
	"""Exception raised when configuration file cannot be parsed."""


class ConfigLoader:
	"""
	Loads and manages configuration for docsymbols using Pydantic schemas.

	Configuration is read once from the resolved YAML file and validated
	into an AppConfigSchema. Missing files fall back to schema defaults.

	"""

	_instance = None  # For singleton pattern

	@classmethod
	def get_instance(cls, config_file: Path | None = None, reload: bool = False) -> "ConfigLoader":
		"""
		Get the singleton instance of ConfigLoader.

		Args:
			config_file: Path to configuration file (optional)
			reload: Whether to reload config even if already loaded

		Returns:
			ConfigLoader: Singleton instance

		"""
		if cls._instance is None:
			cls._instance = cls(config_file)
		elif reload:
			cls._instance.reload_config(config_file)
		return cls._instance

	@classmethod
	def reset_instance(cls) -> None:
		"""Forget the singleton instance."""
		cls._instance = None

	def __init__(self, config_file: Path | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
			config_file: Path to configuration file (optional)

		"""
		self._config_file = config_file
		self._resolved_config_file = self._resolve_config_file(config_file)
		self._app_config = self._load_config()
		logger.debug("ConfigLoader initialized from %s", self._resolved_config_file)

	def reload_config(self, config_file: Path | None = None) -> None:
		"""
		Reload configuration with new settings.

		Args:
			config_file: New configuration file path
		"""
		if config_file is not None:
			self._config_file = config_file
		self._resolved_config_file = self._resolve_config_file(self._config_file)
		self._app_config = self._load_config()
		logger.debug("Configuration reloaded")

	def _resolve_config_file(self, config_file: Path | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. ./.docsymbols.yml in the current directory
		2. $XDG_CONFIG_HOME/docsymbols/config.yml

		Args:
			config_file: Explicitly provided config file path (optional)

		Returns:
			Optional[Path]: Resolved config file path or None if no suitable file found

		"""
		if config_file:
			path = Path(config_file).expanduser().resolve()
			if not path.exists():
				logger.warning("Specified config file not found: %s", path)
			return path

		local_config = Path(LOCAL_CONFIG_NAME)
		if local_config.exists():
			return local_config

		xdg_config_file = Path(xdg_config_home) / "docsymbols" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		return None

	@staticmethod
	def _parse_yaml_file(file_path: Path) -> dict[str, Any]:
		"""
		Parse a YAML file into a dictionary.

		Args:
			file_path: Path to the YAML file to parse

		Returns:
			Parsed YAML content as a dictionary

		Raises:
			yaml.YAMLError: If the file cannot be parsed as valid YAML
		"""
		with file_path.open(encoding="utf-8") as f:
			content = yaml.safe_load(f)
			if content is None:  # Empty file
				return {}
			if not isinstance(content, dict):
				msg = f"File {file_path} does not contain a valid YAML dictionary"
				raise yaml.YAMLError(msg)
			return content

	def _load_config(self) -> AppConfigSchema:
		"""
		Load configuration from file and parse it into AppConfigSchema.

		Returns:
			AppConfigSchema: Loaded and parsed configuration.

		Raises:
			ConfigParsingError: If configuration file exists but cannot be loaded or parsed.

		"""
		file_config_dict: dict[str, Any] = {}
		if self._resolved_config_file:
			if self._resolved_config_file.exists():
				try:
					file_config_dict = self._parse_yaml_file(self._resolved_config_file)
					logger.info("Loaded configuration from %s", self._resolved_config_file)
				except yaml.YAMLError as e:
					msg = f"Configuration file {self._resolved_config_file} does not contain a valid YAML dictionary."
					logger.exception(msg)
					raise ConfigParsingError(msg) from e
				except OSError as e:
					msg = f"Error accessing configuration file {self._resolved_config_file}: {e}"
					logger.exception(msg)
					raise ConfigParsingError(msg) from e
			else:
				logger.info("Configuration file not found: %s. Using default configuration.", self._resolved_config_file)
		else:
			logger.info("No configuration file specified or found. Using default configuration.")

		try:
			return AppConfigSchema(**file_config_dict)
		except ValidationError as e:
			msg = f"Error parsing configuration into schema: {e}"
			logger.exception(msg)
			raise ConfigParsingError(msg) from e

	@property
	def get(self) -> AppConfigSchema:
		"""
		Get the current application configuration.

		Returns:
			AppConfigSchema: The current configuration
		"""
		return self._app_config

	@property
	def config_file(self) -> Path | None:
		"""The configuration file in use, if any."""
		return self._resolved_config_file


def is_test_mode() -> bool:
	"""Whether the process runs with the short test debounce window."""
	return bool(os.environ.get(TEST_MODE_ENV_VAR))


def get_debounce_delay(config: SymbolsConfigSchema | None = None) -> float:
	"""
	Return the debounce window in seconds.

	Args:
	    config: Symbols settings to read the delay from. Defaults to the loaded configuration.

	Returns:
	    The test window when test mode is on, otherwise the configured delay.
	"""
	if is_test_mode():
		return TEST_DEBOUNCE_DELAY
	if config is None:
		config = ConfigLoader.get_instance().get.symbols
	return config.debounce_delay
