"""Builders for Notion property values and blocks."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Notion rejects rich text items longer than this
MAX_TEXT_LENGTH = 2000

# Notion rejects rich text arrays with more items than this
MAX_TEXT_ITEMS = 100

PropertyValue = dict[str, Any]


def _text_items(content: str) -> list[dict[str, Any]]:
	"""Split content into rich text items that fit Notion's limits."""
	if not content:
		return [{"type": "text", "text": {"content": ""}}]
	limit = MAX_TEXT_LENGTH * MAX_TEXT_ITEMS
	if len(content) > limit:
		logger.warning("Truncating text of %d characters to %d", len(content), limit)
		content = content[:limit]
	return [
		{"type": "text", "text": {"content": content[i : i + MAX_TEXT_LENGTH]}}
		for i in range(0, len(content), MAX_TEXT_LENGTH)
	]


def title_property(content: str) -> PropertyValue:
	return {"title": _text_items(content)}


def rich_text_property(content: str) -> PropertyValue:
	return {"rich_text": _text_items(content)}


def url_property(url: str | None) -> PropertyValue:
	return {"url": url or None}


def multi_select_property(*names: str) -> PropertyValue:
	return {"multi_select": [{"name": name} for name in names]}


def relation_property(*page_ids: str) -> PropertyValue:
	return {"relation": [{"id": page_id} for page_id in page_ids]}


def equals_filter(property_name: str, property_type: str, value: str) -> dict[str, Any]:
	"""Database query filter matching a property exactly."""
	return {"property": property_name, property_type: {"equals": value}}


def files_toggle_block(files: str) -> dict[str, Any]:
	"""Collapsible block titled "Files" holding the rendered file list."""
	return {
		"object": "block",
		"type": "toggle",
		"toggle": {
			"rich_text": [
				{"type": "text", "text": {"content": "Files"}, "annotations": {"bold": True}},
			],
			"children": [
				{
					"object": "block",
					"type": "paragraph",
					"paragraph": {"rich_text": _text_items(files)},
				}
			],
		},
	}
