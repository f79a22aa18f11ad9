"""Tests for the Notion gateway and property builders."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, create_autospec

import httpx
import pytest
from notion_client import Client
from notion_client.api_endpoints import DatabasesEndpoint, PagesEndpoint

from gitnotion.github.changed_files import FileChangeSet
from gitnotion.notion.client import NotionGateway
from gitnotion.notion.properties import (
	MAX_TEXT_ITEMS,
	MAX_TEXT_LENGTH,
	files_toggle_block,
	relation_property,
	rich_text_property,
	url_property,
)
from gitnotion.notion.publisher import CommitPublisher
from gitnotion.schemas import CommitDescriptor

if TYPE_CHECKING:
	from collections.abc import Callable
	from typing import Any

	from gitnotion.config.config_schema import AppConfigSchema


@pytest.fixture
def sdk() -> MagicMock:
	"""A Notion SDK client whose endpoints only accept the calls the SDK defines."""
	client = MagicMock(spec=Client)
	client.databases = create_autospec(DatabasesEndpoint, instance=True)
	client.pages = create_autospec(PagesEndpoint, instance=True)
	return client


@pytest.fixture
def http_sdk() -> Callable[[Callable[[httpx.Request], httpx.Response]], Client]:
	"""Factory for a real SDK client whose requests are answered by a handler."""

	def _make(handler: Callable[[httpx.Request], httpx.Response]) -> Client:
		return Client(auth="secret_test", client=httpx.Client(transport=httpx.MockTransport(handler)))

	return _make


@pytest.mark.unit
@pytest.mark.notion
class TestNotionGateway:
	"""NotionGateway calls into the Notion SDK."""

	def test_find_first_returns_first_result(self, sdk: MagicMock) -> None:
		sdk.databases.query.return_value = {"results": [{"id": "p1"}, {"id": "p2"}]}

		page = NotionGateway(client=sdk).find_first("db", "Name", "title", "Login page")

		assert page == {"id": "p1"}
		sdk.databases.query.assert_called_once_with(
			database_id="db", filter={"property": "Name", "title": {"equals": "Login page"}}
		)

	def test_find_first_without_results(self, sdk: MagicMock) -> None:
		sdk.databases.query.return_value = {"results": []}

		assert NotionGateway(client=sdk).find_first("db", "Short Name", "rich_text", "acme") is None

	def test_create_page(self, sdk: MagicMock) -> None:
		sdk.pages.create.return_value = {"id": "new"}

		page = NotionGateway(client=sdk).create_page("db", {"title": {}})

		assert page == {"id": "new"}
		sdk.pages.create.assert_called_once_with(parent={"database_id": "db"}, properties={"title": {}}, children=[])

	def test_update_page(self, sdk: MagicMock) -> None:
		NotionGateway(client=sdk).update_page("p1", {"Version": {}})

		sdk.pages.update.assert_called_once_with(page_id="p1", properties={"Version": {}})

	def test_context_manager_closes_client(self, sdk: MagicMock) -> None:
		with NotionGateway(client=sdk) as gateway:
			assert isinstance(gateway, NotionGateway)

		sdk.close.assert_called_once_with()


@pytest.mark.unit
@pytest.mark.notion
class TestNotionGatewayOverHttp:
	"""NotionGateway driving the real SDK against canned HTTP responses."""

	def test_find_first_queries_the_database(self, http_sdk: Callable[..., Client]) -> None:
		requests: list[httpx.Request] = []

		def handler(request: httpx.Request) -> httpx.Response:
			requests.append(request)
			return httpx.Response(200, json={"object": "list", "results": [{"object": "page", "id": "task-page"}]})

		page = NotionGateway(client=http_sdk(handler)).find_first("tasks-db", "Name", "title", "Some task")

		assert page == {"object": "page", "id": "task-page"}
		assert len(requests) == 1
		assert requests[0].method == "POST"
		assert requests[0].url.path == "/v1/databases/tasks-db/query"
		assert json.loads(requests[0].content)["filter"] == {"property": "Name", "title": {"equals": "Some task"}}

	def test_create_page_posts_parent_and_children(self, http_sdk: Callable[..., Client]) -> None:
		requests: list[httpx.Request] = []

		def handler(request: httpx.Request) -> httpx.Response:
			requests.append(request)
			return httpx.Response(200, json={"object": "page", "id": "commit-page"})

		page = NotionGateway(client=http_sdk(handler)).create_page("commits-db", {"title": {"title": []}})

		assert page["id"] == "commit-page"
		assert requests[0].url.path == "/v1/pages"
		body = json.loads(requests[0].content)
		assert body["parent"] == {"database_id": "commits-db"}
		assert body["children"] == []

	def test_close_closes_http_client(self) -> None:
		http = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))

		NotionGateway(client=Client(auth="secret_test", client=http)).close()

		assert http.is_closed

	def test_task_link_published_through_sdk(self, http_sdk: Callable[..., Client], app_config: AppConfigSchema) -> None:
		created: list[dict[str, Any]] = []

		def handler(request: httpx.Request) -> httpx.Response:
			if request.url.path == "/v1/databases/tasks-db/query":
				return httpx.Response(200, json={"object": "list", "results": [{"object": "page", "id": "task-page"}]})
			created.append(json.loads(request.content))
			return httpx.Response(200, json={"object": "page", "id": "commit-page"})

		publisher = CommitPublisher(
			app_config, NotionGateway(client=http_sdk(handler)), "widgets", FileChangeSet.skipped("test")
		)
		result = publisher.publish_commit(
			CommitDescriptor(id="c" * 40, url="https://example.test/c", message="Fix\natnt: Some task")
		)

		assert result.task_page_id == "task-page"
		assert created[0]["properties"]["task"] == {"relation": [{"id": "task-page"}]}

	def test_lookup_api_error_does_not_stop_publishing(
		self, http_sdk: Callable[..., Client], app_config: AppConfigSchema
	) -> None:
		def handler(request: httpx.Request) -> httpx.Response:
			if request.url.path.endswith("/query"):
				return httpx.Response(
					400,
					json={"object": "error", "status": 400, "code": "validation_error", "message": "bad filter"},
				)
			return httpx.Response(200, json={"object": "page", "id": "commit-page"})

		publisher = CommitPublisher(
			app_config, NotionGateway(client=http_sdk(handler)), "widgets", FileChangeSet.skipped("test")
		)
		result = publisher.publish_commit(
			CommitDescriptor(id="c" * 40, url="https://example.test/c", message="Fix\natnt: Some task")
		)

		assert result.page_id == "commit-page"
		assert result.task_page_id is None


@pytest.mark.unit
@pytest.mark.notion
class TestProperties:
	"""Property and block builders."""

	def test_long_text_is_split(self) -> None:
		value = rich_text_property("x" * (MAX_TEXT_LENGTH + 10))

		assert [len(item["text"]["content"]) for item in value["rich_text"]] == [MAX_TEXT_LENGTH, 10]

	def test_oversized_text_is_truncated(self) -> None:
		block = files_toggle_block("y" * (MAX_TEXT_LENGTH * MAX_TEXT_ITEMS + 5))

		items = block["toggle"]["children"][0]["paragraph"]["rich_text"]
		assert len(items) == MAX_TEXT_ITEMS
		assert all(len(item["text"]["content"]) == MAX_TEXT_LENGTH for item in items)

	def test_empty_text_keeps_one_item(self) -> None:
		assert rich_text_property("") == {"rich_text": [{"type": "text", "text": {"content": ""}}]}

	def test_empty_url_is_null(self) -> None:
		assert url_property("") == {"url": None}

	def test_relation(self) -> None:
		assert relation_property("a", "b") == {"relation": [{"id": "a"}, {"id": "b"}]}

	def test_files_toggle_block(self) -> None:
		block = files_toggle_block("a.py b.py")

		heading = block["toggle"]["rich_text"][0]
		assert heading["text"]["content"] == "Files"
		assert heading["annotations"] == {"bold": True}
		paragraph = block["toggle"]["children"][0]["paragraph"]
		assert paragraph["rich_text"][0]["text"]["content"] == "a.py b.py"
