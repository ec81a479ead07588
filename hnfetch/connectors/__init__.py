"""Connectors module - external service integrations."""

from hnfetch.connectors.hn_api import HackerNewsClient, parse_story

__all__ = ["HackerNewsClient", "parse_story"]
