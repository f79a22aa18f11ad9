"""Utility module for gitnotion package."""

from .actions import error_annotation, is_github_actions, set_output
from .cli_utils import console, exit_with_error, show_error, show_warning
from .log_setup import setup_logging

__all__ = [
	"console",
	"error_annotation",
	"exit_with_error",
	"is_github_actions",
	"set_output",
	"setup_logging",
	"show_error",
	"show_warning",
]
