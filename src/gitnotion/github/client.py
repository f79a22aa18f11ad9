"""Thin wrapper around PyGithub for the calls a publish run needs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Self

from github import Auth, Github

from gitnotion.schemas import CommitDescriptor

if TYPE_CHECKING:
	from types import TracebackType

	from github.Comparison import Comparison
	from github.Repository import Repository

	from gitnotion.github.context import EventContext

logger = logging.getLogger(__name__)


class GitHubClient:
	"""Repository-scoped access to commits, tags and comparisons."""

	def __init__(self, context: EventContext, token: str | None = None, github: Github | None = None) -> None:
		"""
		Initialize the client.

		Args:
		    context: Event context naming the repository
		    token: Token for the GitHub API; anonymous access when omitted
		    github: Preconfigured PyGithub instance (mainly for tests)

		"""
		if github is None:
			github = Github(auth=Auth.Token(token)) if token else Github()
		self._github = github
		self._context = context
		self._repo: Repository | None = None

	def __enter__(self) -> Self:
		return self

	def __exit__(
		self,
		exc_type: type[BaseException] | None,
		exc: BaseException | None,
		tb: TracebackType | None,
	) -> None:
		self.close()

	@property
	def repo(self) -> Repository:
		if self._repo is None:
			logger.debug("Fetching repository %s", self._context.full_name)
			self._repo = self._github.get_repo(self._context.full_name)
		return self._repo

	def get_commit(self, sha: str) -> CommitDescriptor:
		"""
		Fetch a single commit.

		Raises:
		    GithubException: If the commit cannot be fetched

		"""
		logger.debug("Fetching commit %s", sha)
		commit = self.repo.get_commit(sha)
		return CommitDescriptor(id=commit.sha, url=commit.html_url, message=commit.commit.message)

	def get_tag_ref_target(self, tag_name: str) -> tuple[str, str]:
		"""
		Return the ``(type, sha)`` of the object a tag ref points at.

		The type is ``commit`` for a lightweight tag and ``tag`` for an
		annotated one.

		"""
		ref = self.repo.get_git_ref(f"tags/{tag_name}")
		logger.debug("Tag %s points at %s %s", tag_name, ref.object.type, ref.object.sha)
		return ref.object.type, ref.object.sha

	def get_annotated_tag_target(self, tag_sha: str) -> str:
		"""Return the sha of the object an annotated tag object points at."""
		tag = self.repo.get_git_tag(tag_sha)
		return tag.object.sha

	def compare(self, base: str, head: str) -> Comparison:
		"""Compare two revisions of the repository."""
		logger.debug("Comparing %s...%s", base, head)
		return self.repo.compare(base, head)

	def close(self) -> None:
		self._github.close()
