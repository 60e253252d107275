"""Slack to Keeper integration: message normalization and Keeper synchronization."""

__version__ = "0.1.0"
