"""GitHub side of gitnotion: event context, commit resolution and changed files."""

from .changed_files import ChangedFilesError, ChangeOutcome, FileChangeSet, get_changed_files
from .classifier import EventKind, classify_event, resolve_commits, resolve_tag_commit
from .client import GitHubClient
from .context import TAG_REF_PREFIX, ZERO_SHA, EventContext, EventError, EventPayload

__all__ = [
	"TAG_REF_PREFIX",
	"ZERO_SHA",
	"ChangeOutcome",
	"ChangedFilesError",
	"EventContext",
	"EventError",
	"EventKind",
	"EventPayload",
	"FileChangeSet",
	"GitHubClient",
	"classify_event",
	"get_changed_files",
	"resolve_commits",
	"resolve_tag_commit",
]
