"""Notion access used by the publisher."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

import httpx
from notion_client import Client
from notion_client.errors import APIResponseError, HTTPResponseError, RequestTimeoutError

from gitnotion.notion.properties import equals_filter

if TYPE_CHECKING:
	from types import TracebackType

logger = logging.getLogger(__name__)

# Errors a Notion call can raise for remote or transport failures
NOTION_ERRORS = (APIResponseError, HTTPResponseError, RequestTimeoutError, httpx.TransportError)


class NotionGateway:
	"""Queries, creates and updates pages through the official Notion SDK."""

	def __init__(self, auth: str | None = None, client: Client | None = None) -> None:
		if client is None:
			client = Client(auth=auth)
		self._client = client

	def __enter__(self) -> Self:
		return self

	def __exit__(
		self,
		exc_type: type[BaseException] | None,
		exc: BaseException | None,
		tb: TracebackType | None,
	) -> None:
		self.close()

	def find_first(self, database_id: str, property_name: str, property_type: str, value: str) -> dict[str, Any] | None:
		"""
		Return the first page whose property equals ``value``.

		Args:
		    database_id: Database to search
		    property_name: Property to match on
		    property_type: Notion filter type of the property, e.g. ``title`` or ``rich_text``
		    value: Exact value to match

		Returns:
		    The page object, or None when nothing matches

		"""
		response = self._client.databases.query(
			database_id=database_id,
			filter=equals_filter(property_name, property_type, value),
		)
		results = response.get("results", [])
		return results[0] if results else None

	def create_page(
		self, database_id: str, properties: dict[str, Any], children: list[dict[str, Any]] | None = None
	) -> dict[str, Any]:
		return self._client.pages.create(
			parent={"database_id": database_id},
			properties=properties,
			children=children or [],
		)

	def update_page(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
		return self._client.pages.update(page_id=page_id, properties=properties)

	def close(self) -> None:
		"""Close the HTTP connection pool of the SDK client."""
		self._client.close()
