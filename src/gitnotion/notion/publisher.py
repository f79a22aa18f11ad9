"""
Publishing of commits as Notion pages.

Each commit becomes one page in the commit database. Pages are created
one after another, in the order the commits were resolved, and each
create call finishes before the next commit is handled.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from gitnotion.config.config_schema import FilesFormat
from gitnotion.notion.client import NOTION_ERRORS
from gitnotion.notion.properties import (
	files_toggle_block,
	multi_select_property,
	relation_property,
	rich_text_property,
	title_property,
	url_property,
)

if TYPE_CHECKING:
	from collections.abc import Iterable

	from gitnotion.config.config_schema import AppConfigSchema
	from gitnotion.github.changed_files import FileChangeSet
	from gitnotion.notion.client import NotionGateway
	from gitnotion.schemas import CommitDescriptor

logger = logging.getLogger(__name__)


class PublishError(Exception):
	"""Raised when a commit page cannot be created."""


@dataclass
class PublishResult:
	"""What was written for one commit."""

	commit_id: str
	page_id: str
	task_page_id: str | None = None
	software_page_id: str | None = None
	client_page_id: str | None = None
	version_updated: bool = False


class CommitPublisher:
	"""Writes commits to the commit database with their related pages."""

	def __init__(
		self,
		config: AppConfigSchema,
		notion: NotionGateway,
		repository: str,
		change_set: FileChangeSet,
	) -> None:
		"""
		Initialize the publisher.

		Args:
		    config: Validated run configuration
		    notion: Gateway to the Notion API
		    repository: Repository name, used for the project tag and software lookup
		    change_set: Files changed by the event, shared by all commits

		"""
		self.config = config
		self.notion = notion
		self.repository = repository
		self.files_block = self._build_files_block(change_set)

	def _build_files_block(self, change_set: FileChangeSet) -> dict[str, Any] | None:
		files_format = self.config.effective_files_format
		if files_format is FilesFormat.NONE:
			logger.info("No file will be listed")
			return None
		files = change_set.render(files_format)
		logger.debug("Files block content: %s", files)
		return files_toggle_block(files)

	def _lookup(
		self, label: str, database_id: str | None, property_name: str, property_type: str, value: str
	) -> str | None:
		"""Find a related page id; failures are logged and treated as not found."""
		if not database_id or not value:
			return None
		try:
			page = self.notion.find_first(database_id, property_name, property_type, value)
		except NOTION_ERRORS as e:
			logger.warning("%s lookup for %r failed: %s", label, value, e)
			return None
		if page is None:
			logger.info("No %s page found for %r", label.lower(), value)
			return None
		return page["id"]

	def find_task_page(self, task_name: str) -> str | None:
		return self._lookup(
			"Task", self.config.task_database_id, self.config.lookups.task_title, "title", task_name
		)

	def find_software_page(self) -> str | None:
		return self._lookup(
			"Software",
			self.config.software_database_id,
			self.config.lookups.software_repository,
			"rich_text",
			self.repository,
		)

	def find_client_page(self, short_name: str) -> str | None:
		return self._lookup(
			"Client",
			self.config.client_database_id,
			self.config.lookups.client_short_name,
			"rich_text",
			short_name,
		)

	def build_properties(
		self,
		commit: CommitDescriptor,
		task_page_id: str | None = None,
		software_page_id: str | None = None,
		client_page_id: str | None = None,
	) -> dict[str, Any]:
		"""Property values of the page for a commit."""
		fields = self.config.fields
		message = commit.parsed_message

		properties: dict[str, Any] = {fields.title: title_property(message.title)}
		if task_page_id:
			properties[fields.task] = relation_property(task_page_id)
		if software_page_id:
			properties[fields.software] = relation_property(software_page_id)
		if client_page_id:
			properties[fields.client] = relation_property(client_page_id)

		properties[fields.commit_url] = url_property(commit.url)
		properties[fields.commit_id] = rich_text_property(commit.id)
		properties[fields.commit_description] = rich_text_property(message.description)
		properties[fields.commit_project] = multi_select_property(self.repository)

		if commit.tag_name:
			properties[fields.tag_name] = rich_text_property(commit.tag_name)
			properties[fields.tag_url] = url_property(commit.tag_url)
		return properties

	def update_client_version(self, client_page_id: str, version: str) -> bool:
		"""
		Set the current version of a client page.

		Best effort: a failure is logged and the commit page already created
		is kept.

		"""
		try:
			self.notion.update_page(
				client_page_id, {self.config.fields.client_version: rich_text_property(version)}
			)
		except NOTION_ERRORS as e:
			logger.warning("Could not update version of client page %s to %s: %s", client_page_id, version, e)
			return False
		logger.info("Client page %s now at version %s", client_page_id, version)
		return True

	def publish_commit(self, commit: CommitDescriptor) -> PublishResult:
		"""
		Create the page for one commit.

		Raises:
		    PublishError: If the page cannot be created

		"""
		task_name = commit.task_name
		task_page_id = self.find_task_page(task_name) if task_name else None

		software_page_id = client_page_id = None
		tag_info = commit.tag_info
		if tag_info is not None:
			software_page_id = self.find_software_page()
			client_page_id = self.find_client_page(tag_info.client_short_name)

		properties = self.build_properties(commit, task_page_id, software_page_id, client_page_id)
		children = [self.files_block] if self.files_block else []

		try:
			page = self.notion.create_page(self.config.notion_database, properties, children)
		except NOTION_ERRORS as e:
			msg = f"Failed to create page for commit {commit.id}: {e}"
			raise PublishError(msg) from e
		logger.info("Published commit %s as page %s", commit.id[:7], page["id"])

		result = PublishResult(
			commit_id=commit.id,
			page_id=page["id"],
			task_page_id=task_page_id,
			software_page_id=software_page_id,
			client_page_id=client_page_id,
		)
		if client_page_id and tag_info is not None and tag_info.version:
			result.version_updated = self.update_client_version(client_page_id, tag_info.version)
		return result

	def publish(self, commits: Iterable[CommitDescriptor]) -> list[PublishResult]:
		"""Publish commits in order, stopping at the first page that cannot be created."""
		return [self.publish_commit(commit) for commit in commits]
