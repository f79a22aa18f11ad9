"""
Event classification and commit resolution.

Decides which kind of event triggered the run and turns it into the list
of commits to publish, fetching from the GitHub API whatever the payload
does not carry.

"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from gitnotion.github.context import ZERO_SHA, EventError
from gitnotion.schemas import CommitDescriptor

if TYPE_CHECKING:
	from gitnotion.github.client import GitHubClient
	from gitnotion.github.context import EventContext

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
	"""Processing path for an event."""

	TAG_PUSH = "tag_push"
	COMMITS_PUSH = "commits_push"
	FIRST_PUSH = "first_push"
	UNSUPPORTED = "unsupported"


def classify_event(context: EventContext) -> EventKind:
	"""
	Classify an event; the first matching rule wins.

	1. a ref under ``refs/tags/`` is a tag push
	2. a non-empty embedded commit list is a regular push
	3. an all-zero ``before`` is the first push of a new branch
	4. anything else is unsupported

	"""
	payload = context.payload
	if context.is_tag_push:
		return EventKind.TAG_PUSH
	if payload.commits:
		return EventKind.COMMITS_PUSH
	if payload.before == ZERO_SHA:
		return EventKind.FIRST_PUSH
	return EventKind.UNSUPPORTED


def resolve_tag_commit(client: GitHubClient, tag_name: str) -> str:
	"""
	Resolve a tag to the sha of the commit it marks.

	Lightweight tags point at the commit directly; annotated tags need one
	more lookup through the tag object.

	Raises:
	    EventError: If the tag points at something other than a commit or tag

	"""
	object_type, sha = client.get_tag_ref_target(tag_name)
	if object_type == "commit":
		return sha
	if object_type == "tag":
		return client.get_annotated_tag_target(sha)
	msg = f"Unexpected tag object type: {object_type}"
	raise EventError(msg)


def resolve_commits(context: EventContext, client: GitHubClient) -> list[CommitDescriptor]:
	"""
	Resolve the commits to publish for an event.

	Args:
	    context: Event context of the run
	    client: GitHub client used when the payload lacks commit data

	Returns:
	    Commits in the order they should be published

	Raises:
	    EventError: If the event shape is not supported or a tag cannot be resolved
	    GithubException: If a required GitHub API call fails

	"""
	kind = classify_event(context)
	logger.info("Handling %s event as %s", context.event_name, kind.value)

	if kind is EventKind.TAG_PUSH:
		tag_name = context.tag_name
		commit = client.get_commit(resolve_tag_commit(client, tag_name))
		return [
			CommitDescriptor(
				id=commit.id,
				url=commit.url,
				message=commit.message,
				tag_name=tag_name,
				tag_url=context.release_url(tag_name),
			)
		]

	if kind is EventKind.COMMITS_PUSH:
		return [CommitDescriptor(id=c.id, url=c.url, message=c.message) for c in context.payload.commits]

	if kind is EventKind.FIRST_PUSH:
		head = context.payload.after
		if not head:
			msg = "First push event carries no 'after' revision to publish."
			raise EventError(msg)
		return [client.get_commit(head)]

	msg = "Unexpected event structure: no commits or tag found."
	raise EventError(msg)
