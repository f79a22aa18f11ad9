"""Helpers for talking to the GitHub Actions runner."""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

import typer

logger = logging.getLogger(__name__)


def is_github_actions() -> bool:
	"""Return True when running inside a GitHub Actions job."""
	return os.environ.get("GITHUB_ACTIONS") == "true"


def input_env_name(name: str) -> str:
	"""
	Return the environment variable the runner uses for an action input.

	The runner upper-cases the input name and replaces spaces with
	underscores, so ``files_format`` becomes ``INPUT_FILES_FORMAT``.

	"""
	return f"INPUT_{name.replace(' ', '_').upper()}"


def escape_data(value: str) -> str:
	"""Escape a message for use in a workflow command."""
	return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def error_annotation(message: str) -> None:
	"""Emit an ``::error::`` workflow command so the run shows the failure reason."""
	typer.echo(f"::error::{escape_data(message)}")


def set_output(name: str, value: str) -> bool:
	"""
	Write a step output to the file named by ``GITHUB_OUTPUT``.

	Args:
	    name: Output name
	    value: Output value, may span several lines

	Returns:
	    True if the output was written, False when no output file is configured

	"""
	output_path = os.environ.get("GITHUB_OUTPUT")
	if not output_path:
		logger.debug("GITHUB_OUTPUT not set, skipping output %s", name)
		return False

	delimiter = f"ghadelimiter_{uuid.uuid4()}"
	with Path(output_path).open("a", encoding="utf-8") as f:
		f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
	logger.debug("Set output %s", name)
	return True
