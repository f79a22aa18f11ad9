"""
Configuration loader for gitnotion.

Settings are merged from the schema defaults, an optional YAML file and
the GitHub Actions inputs of the current step, then validated once.

"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from xdg.BaseDirectory import xdg_config_home

from gitnotion.config.config_schema import AppConfigSchema
from gitnotion.utils.actions import input_env_name

logger = logging.getLogger(__name__)

# Action input name -> path inside AppConfigSchema
INPUT_KEYS: dict[str, tuple[str, ...]] = {
	"notion_secret": ("notion_secret",),
	"token": ("github_token",),
	"notion_database": ("notion_database",),
	"task_database_id": ("task_database_id",),
	"software_database_id": ("software_database_id",),
	"client_database_id": ("client_database_id",),
	"files_format": ("files_format",),
	"fail_on_diverged_compare": ("fail_on_diverged_compare",),
	"commit_url": ("fields", "commit_url"),
	"commit_id": ("fields", "commit_id"),
	"commit_description": ("fields", "commit_description"),
	"commit_project": ("fields", "commit_project"),
	"tag_name": ("fields", "tag_name"),
	"tag_url": ("fields", "tag_url"),
}


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigFileNotFoundError(ConfigError):
	"""Exception raised when configuration file is not found."""


class ConfigParsingError(ConfigError):
	"""Exception raised when configuration file cannot be parsed."""


class ConfigLoader:
	"""
	Loads and validates the configuration of a publish run.

	Configuration is read eagerly on construction, so a bad value fails
	the run before anything is written to Notion.

	"""

	_instance: ConfigLoader | None = None

	@classmethod
	def get_instance(
		cls, config_file: Path | None = None, reload: bool = False, environ: dict[str, str] | None = None
	) -> ConfigLoader:
		"""
		Get the shared instance of ConfigLoader.

		Args:
			config_file: Path to configuration file (optional)
			reload: Whether to reload config even if already loaded
			environ: Environment to read action inputs from (defaults to os.environ)

		Returns:
			ConfigLoader: Shared instance

		"""
		if cls._instance is None or reload:
			cls._instance = cls(config_file, environ=environ)
		return cls._instance

	def __init__(self, config_file: Path | None = None, environ: dict[str, str] | None = None) -> None:
		self._environ = os.environ if environ is None else environ
		self._resolved_config_file = self._resolve_config_file(config_file)
		self._app_config = self._load_config()

	@staticmethod
	def _resolve_config_file(config_file: Path | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified it must exist. Otherwise, look in:
		1. ./.gitnotion.yml in the current directory
		2. $XDG_CONFIG_HOME/gitnotion/config.yml

		Raises:
			ConfigFileNotFoundError: If an explicit config file does not exist

		"""
		if config_file:
			path = config_file.expanduser().resolve()
			if not path.exists():
				msg = f"Config file not found: {path}"
				raise ConfigFileNotFoundError(msg)
			return path

		local_config = Path(".gitnotion.yml")
		if local_config.exists():
			return local_config

		xdg_config_file = Path(xdg_config_home) / "gitnotion" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		return None

	@staticmethod
	def _parse_yaml_file(file_path: Path) -> dict[str, Any]:
		"""
		Parse a YAML file into a dictionary.

		Raises:
			ConfigParsingError: If the file is not a valid YAML mapping
		"""
		try:
			with file_path.open(encoding="utf-8") as f:
				content = yaml.safe_load(f)
		except (OSError, yaml.YAMLError) as e:
			msg = f"Could not read configuration file {file_path}: {e}"
			raise ConfigParsingError(msg) from e

		if content is None:
			return {}
		if not isinstance(content, dict):
			msg = f"File {file_path} does not contain a valid YAML dictionary"
			raise ConfigParsingError(msg)
		return content

	def _read_inputs(self) -> dict[str, Any]:
		"""Collect the non-empty action inputs as a nested dictionary."""
		inputs: dict[str, Any] = {}
		for input_name, path in INPUT_KEYS.items():
			value = self._environ.get(input_env_name(input_name), "").strip()
			if not value:
				continue
			target = inputs
			for key in path[:-1]:
				target = target.setdefault(key, {})
			target[path[-1]] = value
		return inputs

	@classmethod
	def _merge_configs(cls, base: dict[str, Any], override: dict[str, Any]) -> None:
		"""Recursively merge ``override`` into ``base``."""
		for key, value in override.items():
			if isinstance(value, dict) and isinstance(base.get(key), dict):
				cls._merge_configs(base[key], value)
			else:
				base[key] = value

	def _load_config(self) -> AppConfigSchema:
		"""
		Load configuration from file and inputs and parse it into AppConfigSchema.

		Raises:
			ConfigParsingError: If the file cannot be parsed
			ConfigError: If the merged configuration is invalid

		"""
		config_dict: dict[str, Any] = {}
		if self._resolved_config_file:
			config_dict = self._parse_yaml_file(self._resolved_config_file)
			logger.info("Loaded configuration from %s", self._resolved_config_file)

		self._merge_configs(config_dict, self._read_inputs())

		try:
			return AppConfigSchema(**config_dict)
		except ValidationError as e:
			problems = "; ".join(
				f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
			)
			msg = f"Invalid configuration: {problems}"
			raise ConfigError(msg) from e

	@property
	def get(self) -> AppConfigSchema:
		"""
		Get the current application configuration.

		Returns:
			AppConfigSchema: The current configuration
		"""
		return self._app_config
