"""Notion side of gitnotion: property builders, API gateway and publisher."""

from .client import NOTION_ERRORS, NotionGateway
from .publisher import CommitPublisher, PublishError, PublishResult

__all__ = ["NOTION_ERRORS", "CommitPublisher", "NotionGateway", "PublishError", "PublishResult"]
