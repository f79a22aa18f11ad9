"""Command for publishing the commits of a GitHub event to Notion."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
	from gitnotion.config.config_schema import FilesFormat
	from gitnotion.github.changed_files import FileChangeSet
	from gitnotion.notion.publisher import PublishResult
	from gitnotion.schemas import CommitDescriptor

logger = logging.getLogger(__name__)

# --- Command Argument Annotations ---

EventPathOpt = Annotated[
	Path | None,
	typer.Option(
		"--event-path",
		help="Path to the webhook payload (defaults to $GITHUB_EVENT_PATH)",
		exists=True,
		dir_okay=False,
	),
]

EventNameOpt = Annotated[
	str | None,
	typer.Option("--event-name", help="Event name such as push or pull_request (defaults to $GITHUB_EVENT_NAME)"),
]

RepositoryOpt = Annotated[
	str | None,
	typer.Option("--repository", "-r", help="Repository as owner/name (defaults to $GITHUB_REPOSITORY)"),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option("--config", "-c", help="YAML configuration file", dir_okay=False),
]

DryRunFlag = Annotated[
	bool,
	typer.Option("--dry-run", help="Resolve and show the commits without writing to Notion"),
]

# --- Registration Function ---


def register_command(app: typer.Typer) -> None:
	"""Register the publish command with the CLI app."""

	@app.command(name="publish")
	def publish_command(
		event_path: EventPathOpt = None,
		event_name: EventNameOpt = None,
		repository: RepositoryOpt = None,
		config_file: ConfigOpt = None,
		dry_run: DryRunFlag = False,
	) -> None:
		"""
		Publish the commits of a push or tag event as Notion pages.

		Each commit becomes one page in the commit database, linked to its
		task, and for tags to the software and client pages.

		"""
		_publish_command_impl(
			event_path=event_path,
			event_name=event_name,
			repository=repository,
			config_file=config_file,
			dry_run=dry_run,
		)


# --- Implementation Function (Heavy imports deferred here) ---


def _publish_command_impl(
	event_path: Path | None,
	event_name: str | None,
	repository: str | None,
	config_file: Path | None,
	dry_run: bool,
) -> None:
	"""Actual implementation of the publish command."""
	from github.GithubException import GithubException
	from requests import RequestException

	from gitnotion.config import ConfigError, ConfigLoader
	from gitnotion.github import (
		ChangedFilesError,
		EventContext,
		EventError,
		GitHubClient,
		get_changed_files,
		resolve_commits,
	)
	from gitnotion.notion import CommitPublisher, NotionGateway, PublishError
	from gitnotion.utils.cli_utils import exit_with_error, handle_keyboard_interrupt

	error: Exception | None = None
	message = ""
	try:
		config = ConfigLoader.get_instance(config_file=config_file, reload=True).get
		context = EventContext.from_environment(event_path=event_path, event_name=event_name, repository=repository)

		with GitHubClient(context, token=config.github_token) as github:
			commits = resolve_commits(context, github)
			if dry_run:
				_show_commits(commits)
				return

			change_set = get_changed_files(
				context,
				github,
				config.effective_files_format,
				fail_on_diverged=config.fail_on_diverged_compare,
			)

		with NotionGateway(auth=config.notion_secret) as notion:
			results = CommitPublisher(config, notion, context.repo, change_set).publish(commits)
		_write_outputs(change_set, results, config.effective_files_format)
		_show_summary(results, change_set)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (ConfigError, EventError, ChangedFilesError, PublishError, GithubException, RequestException) as e:
		error, message = e, str(e)
	except Exception as e:
		logger.exception("An unexpected error occurred during the publish command.")
		error, message = e, f"An unexpected error occurred: {e}"

	if error is not None:
		exit_with_error(message, exception=error)


def _write_outputs(change_set: FileChangeSet, results: list[PublishResult], files_format: FilesFormat) -> None:
	from gitnotion.utils.actions import set_output

	for name, value in change_set.outputs(files_format).items():
		set_output(name, value)
	set_output("records", str(len(results)))


def _show_commits(commits: list[CommitDescriptor]) -> None:
	from rich.table import Table

	from gitnotion.utils.cli_utils import console

	table = Table(title="Commits to publish")
	table.add_column("Commit", style="cyan", no_wrap=True)
	table.add_column("Title")
	table.add_column("Task", style="magenta")
	table.add_column("Tag", style="green")
	for commit in commits:
		table.add_row(commit.id[:7], commit.parsed_message.title, commit.task_name, commit.tag_name or "")
	console.print(table)


def _show_summary(results: list[PublishResult], change_set: FileChangeSet) -> None:
	from gitnotion.github.changed_files import ChangeOutcome
	from gitnotion.utils.cli_utils import console, show_warning

	console.print(f"[green]Published {len(results)} commit(s) to Notion.[/green]")
	for result in results:
		if result.version_updated:
			console.print(f"[green]Updated client page {result.client_page_id}.[/green]")
	if change_set.outcome is ChangeOutcome.FAILED:
		show_warning(f"Commits were published without a file list: {change_set.reason}")
