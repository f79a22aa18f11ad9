"""Data structures shared by the event classifier and the publisher."""

from __future__ import annotations

import re
from dataclasses import dataclass

TASK_MARKER = "atnt:"

_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass(frozen=True)
class CommitMessage:
	"""A commit message split into its title line and a one-line description."""

	title: str
	description: str

	@classmethod
	def parse(cls, message: str) -> CommitMessage:
		"""
		Split a raw commit message.

		The first line is the title. The remaining lines are joined with
		single spaces into the description, which is empty for a one-line
		message.

		"""
		lines = _LINE_SPLIT.split(message)
		return cls(title=lines[0], description=" ".join(lines[1:]))


@dataclass(frozen=True)
class TagInfo:
	"""Version and client short name encoded in a ``<version>_<client>`` tag."""

	version: str
	client_short_name: str

	@classmethod
	def parse(cls, tag_name: str) -> TagInfo:
		version, _, client_short_name = tag_name.partition("_")
		return cls(version=version, client_short_name=client_short_name)


@dataclass(frozen=True)
class CommitDescriptor:
	"""One commit to publish."""

	id: str
	url: str
	message: str
	tag_name: str | None = None
	tag_url: str | None = None

	@property
	def parsed_message(self) -> CommitMessage:
		return CommitMessage.parse(self.message)

	@property
	def task_name(self) -> str:
		"""Task reference embedded in the message, or an empty string."""
		return extract_task_name(self.message)

	@property
	def tag_info(self) -> TagInfo | None:
		if not self.tag_name:
			return None
		return TagInfo.parse(self.tag_name)


def extract_task_name(message: str) -> str:
	"""
	Extract the task name following the ``atnt:`` marker.

	Everything after the first marker up to the end of the message is
	taken and trimmed.

	Args:
	    message: Raw commit message

	Returns:
	    The task name, or an empty string when the marker is absent

	"""
	index = message.find(TASK_MARKER)
	if index < 0:
		return ""
	return message[index + len(TASK_MARKER) :].strip()
