"""Keeper integration errors.

Lookup and description-attach failures never reach callers (they degrade to
fallbacks), so only the unrecoverable conditions have exception types here.
"""


class KeeperError(Exception):
    """Base class for Keeper integration failures."""


class CredentialExchangeError(KeeperError):
    """The OAuth client-credentials exchange failed or returned no token."""


class DirectoryFetchError(KeeperError):
    """The client directory could not be listed with either pagination style."""
