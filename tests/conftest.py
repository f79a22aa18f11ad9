"""Global test fixtures and configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock, create_autospec

import pytest

from gitnotion.config.config_schema import AppConfigSchema
from gitnotion.github.context import EventContext, EventPayload
from gitnotion.notion.client import NotionGateway

if TYPE_CHECKING:
	from collections.abc import Callable

HEAD_SHA = "a" * 40
BASE_SHA = "b" * 40


@pytest.fixture(autouse=True)
def clean_action_env(monkeypatch: pytest.MonkeyPatch) -> None:
	"""Keep the runner environment of the test process out of the tests."""
	for name in list(os.environ):
		if name.startswith(("INPUT_", "GITHUB_")):
			monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_context() -> Callable[..., EventContext]:
	"""Factory for event contexts built from a raw payload."""

	def _make(payload: dict[str, Any] | None = None, event_name: str = "push") -> EventContext:
		return EventContext(
			event_name=event_name,
			payload=EventPayload.model_validate(payload or {}),
			owner="acme-corp",
			repo="widgets",
		)

	return _make


@pytest.fixture
def push_payload() -> dict[str, Any]:
	"""A push payload with two embedded commits."""
	return {
		"ref": "refs/heads/main",
		"before": BASE_SHA,
		"after": HEAD_SHA,
		"commits": [
			{
				"id": "1" * 40,
				"url": "https://github.com/acme-corp/widgets/commit/" + "1" * 40,
				"message": "Add widget factory\n\nSupports round widgets.\natnt: Widget factory",
			},
			{
				"id": HEAD_SHA,
				"url": "https://github.com/acme-corp/widgets/commit/" + HEAD_SHA,
				"message": "Fix typo",
			},
		],
		"repository": {"full_name": "acme-corp/widgets"},
	}


@pytest.fixture
def app_config() -> AppConfigSchema:
	"""A configuration with every optional database enabled."""
	return AppConfigSchema(
		notion_secret="secret_test",
		notion_database="commits-db",
		github_token="ghp_test",
		task_database_id="tasks-db",
		software_database_id="software-db",
		client_database_id="clients-db",
	)


@pytest.fixture
def mock_github_client() -> MagicMock:
	"""A stand-in for GitHubClient."""
	return MagicMock(name="GitHubClient")


@pytest.fixture
def mock_notion() -> MagicMock:
	"""A stand-in for NotionGateway that creates pages with predictable ids."""
	notion = create_autospec(NotionGateway, instance=True)
	notion.find_first.return_value = None
	notion.create_page.side_effect = lambda database_id, properties, children: {
		"id": f"page-{notion.create_page.call_count}"
	}
	return notion
