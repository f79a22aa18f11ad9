"""
Changed files of the triggering event.

The change set is computed once per run and shared by every published
commit. It is best effort: failures degrade to an empty set whose
``outcome`` records why it is empty.

"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import requests
from github.GithubException import GithubException

from gitnotion.config.config_schema import FilesFormat
from gitnotion.github.context import ZERO_SHA

if TYPE_CHECKING:
	from gitnotion.github.client import GitHubClient
	from gitnotion.github.context import EventContext

logger = logging.getLogger(__name__)

AHEAD_STATUS = "ahead"


class ChangedFilesError(Exception):
	"""Raised when a diverged comparison is configured to fail the run."""


class ChangeOutcome(str, Enum):
	"""Why a change set holds what it holds."""

	COMPARED = "compared"
	SKIPPED = "skipped"
	FAILED = "failed"


@dataclass
class FileChangeSet:
	"""Files changed between the base and head revisions of an event."""

	outcome: ChangeOutcome
	reason: str = ""
	files: list[str] = field(default_factory=list)
	added: list[str] = field(default_factory=list)
	modified: list[str] = field(default_factory=list)
	removed: list[str] = field(default_factory=list)
	renamed: list[str] = field(default_factory=list)

	@classmethod
	def skipped(cls, reason: str) -> FileChangeSet:
		logger.info("No file list: %s", reason)
		return cls(outcome=ChangeOutcome.SKIPPED, reason=reason)

	@classmethod
	def failed(cls, reason: str) -> FileChangeSet:
		logger.warning("File list unavailable: %s", reason)
		return cls(outcome=ChangeOutcome.FAILED, reason=reason)

	@property
	def added_modified(self) -> list[str]:
		return [name for name in self.files if name in self.added or name in self.modified]

	def add(self, filename: str, status: str) -> None:
		"""Record one file with its GitHub change status."""
		self.files.append(filename)
		buckets = {
			"added": self.added,
			"modified": self.modified,
			"removed": self.removed,
			"renamed": self.renamed,
		}
		bucket = buckets.get(status)
		if bucket is None:
			logger.debug("File %s has status %r, listed only with all files", filename, status)
			return
		bucket.append(filename)

	def render(self, files_format: FilesFormat, files: list[str] | None = None) -> str:
		"""
		Render a file list in the given format.

		Args:
		    files_format: Output format
		    files: List to render, defaults to all changed files

		Returns:
		    The rendered list; always empty for ``none``

		"""
		names = self.files if files is None else files
		if files_format is FilesFormat.TEXT_LIST:
			return " ".join(names)
		if files_format is FilesFormat.CSV:
			return ",".join(names)
		if files_format is FilesFormat.JSON:
			return json.dumps(names)
		return ""

	def outputs(self, files_format: FilesFormat) -> dict[str, str]:
		"""Step outputs for the change set, one per status bucket."""
		output_format = FilesFormat.TEXT_LIST if files_format is FilesFormat.NONE else files_format
		return {
			"all": self.render(output_format),
			"added": self.render(output_format, self.added),
			"modified": self.render(output_format, self.modified),
			"removed": self.render(output_format, self.removed),
			"renamed": self.render(output_format, self.renamed),
			"added_modified": self.render(output_format, self.added_modified),
		}


def get_comparison_range(context: EventContext) -> tuple[str | None, str | None] | None:
	"""
	Return the ``(base, head)`` revisions to compare for an event.

	Returns None for event types that have no comparison range.

	"""
	if context.event_name == "pull_request":
		pull_request = context.payload.pull_request
		if pull_request is None:
			return None, None
		return pull_request.base.sha, pull_request.head.sha
	if context.event_name == "push":
		return context.payload.before, context.payload.after
	return None


def get_changed_files(
	context: EventContext,
	client: GitHubClient,
	files_format: FilesFormat,
	fail_on_diverged: bool = False,
) -> FileChangeSet:
	"""
	Compute the files changed by the event.

	Args:
	    context: Event context of the run
	    client: GitHub client for the comparison call
	    files_format: Effective files format; ``none`` skips the comparison
	    fail_on_diverged: Raise instead of degrading when head is not ahead of base

	Returns:
	    The change set, empty when skipped by policy or on failure

	Raises:
	    ChangedFilesError: If ``fail_on_diverged`` is set and head is not ahead of base

	"""
	if files_format is FilesFormat.NONE:
		return FileChangeSet.skipped("file listing is disabled")

	if context.is_tag_push:
		return FileChangeSet.skipped("tag pushes have no file diff")

	comparison_range = get_comparison_range(context)
	if comparison_range is None:
		return FileChangeSet.skipped(f"{context.event_name} events are not supported for file listing")

	base, head = comparison_range
	logger.info("Base commit: %s", base)
	logger.info("Head commit: %s", head)

	if not base or not head:
		return FileChangeSet.skipped(f"base or head commit missing from the {context.event_name} payload")

	if base == ZERO_SHA:
		return FileChangeSet.skipped("first push, no base commit to compare")

	try:
		comparison = client.compare(base, head)
		status = comparison.status
		files = list(comparison.files)
	except (GithubException, requests.RequestException) as e:
		return FileChangeSet.failed(f"comparing {base}...{head} failed: {e}")

	if status != AHEAD_STATUS:
		msg = f"The head commit for this {context.event_name} event is not ahead of the base commit (status {status!r})."
		if fail_on_diverged:
			raise ChangedFilesError(msg)
		return FileChangeSet.failed(msg)

	change_set = FileChangeSet(outcome=ChangeOutcome.COMPARED)
	for file in files:
		if files_format is FilesFormat.TEXT_LIST and " " in file.filename:
			logger.warning(
				"File %r contains a space and cannot be told apart in a text-list; consider csv or json.",
				file.filename,
			)
		change_set.add(file.filename, file.status)

	logger.info("Found %d changed files", len(change_set.files))
	return change_set
