# Connection errors raised by the DHIS2 connector.
# Created: 2026-10-19

from __future__ import annotations


class ConnectionFailure(RuntimeError):
    """The OAuth client secret could not be resolved on the server."""

    def __init__(self, base_url: str, message: str | None = None):
        self.base_url = base_url
        super().__init__(
            message or f"Error getting bearer token, unable to connect to {base_url}"
        )


class DuplicateClientError(ConnectionFailure):
    """More than one OAuth client is registered under the same cid."""

    def __init__(self, base_url: str, cid: str, count: int):
        self.cid = cid
        self.count = count
        super().__init__(
            base_url,
            f"Found {count} OAuth clients with cid '{cid}' on {base_url}, expected at most one",
        )


class TokenFailure(RuntimeError):
    """The token endpoint did not return an access + refresh token pair."""

    def __init__(self, base_url: str):
        self.base_url = base_url
        super().__init__(f"Unable to get token from {base_url}")
