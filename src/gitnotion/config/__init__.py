"""Configuration for gitnotion."""

from .config_loader import ConfigError, ConfigFileNotFoundError, ConfigLoader, ConfigParsingError
from .config_schema import AppConfigSchema, FieldNamesSchema, FilesFormat, LookupSchema

__all__ = [
	"AppConfigSchema",
	"ConfigError",
	"ConfigFileNotFoundError",
	"ConfigLoader",
	"ConfigParsingError",
	"FieldNamesSchema",
	"FilesFormat",
	"LookupSchema",
]
