"""Context of the GitHub event that triggered the run."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"
ZERO_SHA = "0" * 40
DEFAULT_SERVER_URL = "https://github.com"


class EventError(Exception):
	"""Raised when the triggering event cannot be loaded or handled."""


class PayloadCommit(BaseModel):
	"""A commit embedded in a push payload."""

	id: str
	url: str
	message: str


class PullRequestRef(BaseModel):
	sha: str | None = None


class PullRequestPayload(BaseModel):
	base: PullRequestRef = Field(default_factory=PullRequestRef)
	head: PullRequestRef = Field(default_factory=PullRequestRef)


class RepositoryPayload(BaseModel):
	full_name: str | None = None


class EventPayload(BaseModel):
	"""The subset of a push or pull_request webhook payload the tool reads."""

	ref: str = ""
	before: str | None = None
	after: str | None = None
	commits: list[PayloadCommit] = Field(default_factory=list)
	pull_request: PullRequestPayload | None = None
	repository: RepositoryPayload | None = None


@dataclass(frozen=True)
class EventContext:
	"""Event name, payload and repository of the current run."""

	event_name: str
	payload: EventPayload
	owner: str
	repo: str
	server_url: str = DEFAULT_SERVER_URL

	@property
	def full_name(self) -> str:
		return f"{self.owner}/{self.repo}"

	@property
	def is_tag_push(self) -> bool:
		return self.payload.ref.startswith(TAG_REF_PREFIX)

	@property
	def tag_name(self) -> str:
		"""Tag name of a tag push, or an empty string."""
		if not self.is_tag_push:
			return ""
		return self.payload.ref.removeprefix(TAG_REF_PREFIX)

	def release_url(self, tag_name: str) -> str:
		"""Permalink of the release page for a tag."""
		return f"{self.server_url.rstrip('/')}/{self.full_name}/releases/tag/{tag_name}"

	@classmethod
	def from_environment(
		cls,
		event_path: Path | None = None,
		event_name: str | None = None,
		repository: str | None = None,
		environ: dict[str, str] | None = None,
	) -> EventContext:
		"""
		Build the context from the runner environment.

		Explicit arguments win over ``GITHUB_EVENT_PATH``,
		``GITHUB_EVENT_NAME`` and ``GITHUB_REPOSITORY``.

		Raises:
		    EventError: If the event file is missing or invalid, or the
		        repository cannot be determined

		"""
		env = os.environ if environ is None else environ

		name = event_name or env.get("GITHUB_EVENT_NAME", "")
		if not name:
			msg = "No event name given and GITHUB_EVENT_NAME is not set."
			raise EventError(msg)

		path_value = event_path or env.get("GITHUB_EVENT_PATH")
		if not path_value:
			msg = "No event payload given and GITHUB_EVENT_PATH is not set."
			raise EventError(msg)

		payload = load_payload(Path(path_value))

		full_name = repository or env.get("GITHUB_REPOSITORY") or ""
		if not full_name and payload.repository and payload.repository.full_name:
			full_name = payload.repository.full_name
		owner, _, repo = full_name.partition("/")
		if not owner or not repo:
			msg = f"Cannot determine the repository (got {full_name!r}), expected 'owner/name'."
			raise EventError(msg)

		context = cls(
			event_name=name,
			payload=payload,
			owner=owner,
			repo=repo,
			server_url=env.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL,
		)
		logger.debug("Loaded %s event for %s (ref %r)", context.event_name, context.full_name, payload.ref)
		return context


def load_payload(path: Path) -> EventPayload:
	"""
	Read and validate a webhook payload file.

	Raises:
	    EventError: If the file cannot be read or does not look like an event

	"""
	try:
		with path.open(encoding="utf-8") as f:
			raw = json.load(f)
	except (OSError, json.JSONDecodeError) as e:
		msg = f"Could not read event payload {path}: {e}"
		raise EventError(msg) from e

	try:
		return EventPayload.model_validate(raw)
	except ValidationError as e:
		msg = f"Event payload {path} is not a valid push or pull_request event: {e}"
		raise EventError(msg) from e
