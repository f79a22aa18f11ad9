"""gitnotion: publish GitHub push and tag activity to Notion databases."""

__version__ = "0.3.0"
__author__ = "gitnotion contributors"
