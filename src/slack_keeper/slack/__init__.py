"""Slack ingress: interactivity handling, signature verification, and name resolution."""

from slack_keeper.slack.client import get_name_resolver, get_slack_client, reset_client
from slack_keeper.slack.resolver import SlackNameResolver, select_display_name
from slack_keeper.slack.router import router

__all__ = [
    "get_name_resolver",
    "get_slack_client",
    "reset_client",
    "router",
    "select_display_name",
    "SlackNameResolver",
]
