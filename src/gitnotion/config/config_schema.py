"""Pydantic schemas for gitnotion configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilesFormat(str, Enum):
	"""How the list of changed files is rendered."""

	TEXT_LIST = "text-list"
	CSV = "csv"
	JSON = "json"
	NONE = "none"


class FieldNamesSchema(BaseModel):
	"""Property names of the commit database, plus the client version property."""

	model_config = ConfigDict(extra="forbid")

	title: str = "title"
	commit_url: str = "URL"
	commit_id: str = "ID"
	commit_description: str = "Description"
	commit_project: str = "Project"
	tag_name: str = "Tag"
	tag_url: str = "TagURL"
	task: str = "task"
	software: str = "Software"
	client: str = "Client"
	client_version: str = "Version"


class LookupSchema(BaseModel):
	"""Property names used to find related pages in the lookup databases."""

	model_config = ConfigDict(extra="forbid")

	task_title: str = Field(default="Name", description="Title property of the task database")
	software_repository: str = Field(
		default="Repository Name", description="Rich text property holding the repository name"
	)
	client_short_name: str = Field(default="Short Name", description="Rich text property holding the client short name")


class AppConfigSchema(BaseModel):
	"""Top-level configuration for a publish run."""

	model_config = ConfigDict(extra="forbid")

	notion_secret: str = Field(min_length=1)
	notion_database: str = Field(min_length=1, description="Database that receives one page per commit")
	github_token: str | None = None
	task_database_id: str | None = None
	software_database_id: str | None = None
	client_database_id: str | None = None
	files_format: FilesFormat = FilesFormat.TEXT_LIST
	fail_on_diverged_compare: bool = False
	fields: FieldNamesSchema = Field(default_factory=FieldNamesSchema)
	lookups: LookupSchema = Field(default_factory=LookupSchema)

	@field_validator("github_token", "task_database_id", "software_database_id", "client_database_id")
	@classmethod
	def _blank_to_none(cls, value: str | None) -> str | None:
		if value is not None and not value.strip():
			return None
		return value

	@property
	def effective_files_format(self) -> FilesFormat:
		"""Files format actually used; listing needs a GitHub token."""
		if not self.github_token:
			return FilesFormat.NONE
		return self.files_format
