"""Tests for the GitHub Actions runner helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import typer

from gitnotion.utils.actions import error_annotation, escape_data, input_env_name, set_output
from gitnotion.utils.cli_utils import exit_with_error

if TYPE_CHECKING:
	from pathlib import Path


@pytest.mark.unit
class TestActions:
	"""Inputs, outputs and workflow commands."""

	def test_input_env_name(self) -> None:
		assert input_env_name("files_format") == "INPUT_FILES_FORMAT"
		assert input_env_name("notion database") == "INPUT_NOTION_DATABASE"

	def test_escape_data(self) -> None:
		assert escape_data("50% done\r\nnext") == "50%25 done%0D%0Anext"

	def test_error_annotation(self, capsys: pytest.CaptureFixture[str]) -> None:
		error_annotation("first line\nsecond line")

		assert capsys.readouterr().out == "::error::first line%0Asecond line\n"

	def test_set_output_appends(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
		output_file = tmp_path / "output"
		monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))

		assert set_output("all", "a.py b.py")
		assert set_output("records", "2")

		lines = output_file.read_text().splitlines()
		assert lines[0].startswith("all<<ghadelimiter_")
		assert lines[1] == "a.py b.py"
		assert lines[2] == lines[0].split("<<", 1)[1]
		assert lines[3].startswith("records<<")
		assert lines[4] == "2"

	def test_set_output_without_file(self) -> None:
		assert set_output("all", "a.py") is False

	def test_exit_with_error_annotates_in_actions(
		self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
	) -> None:
		monkeypatch.setenv("GITHUB_ACTIONS", "true")

		with pytest.raises(typer.Exit) as exc_info:
			exit_with_error("Notion is down")

		assert exc_info.value.exit_code == 1
		assert "::error::Notion is down" in capsys.readouterr().out
