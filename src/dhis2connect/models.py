# Connection models: credentials, OAuth client registration, token pair.
# Created: 2026-10-19

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any


def basic_auth(user: str, secret: str) -> str:
    """Base64-encode ``user:secret`` for a Basic Authorization header."""
    return base64.b64encode(f"{user}:{secret}".encode()).decode("ascii")


# DHIS2 only needs to mint refresh tokens for this client.
DEFAULT_GRANT_TYPES = ["refresh_token"]


@dataclass
class Credentials:
    """End-user DHIS2 login. Held in memory only."""

    username: str
    password: str = field(repr=False)

    @property
    def basic_auth(self) -> str:
        """Base64 ``username:password`` for a Basic Authorization header."""
        return basic_auth(self.username, self.password)


@dataclass
class ClientRegistration:
    """An OAuth2 client as registered under /api/oAuth2Clients."""

    cid: str
    secret: str = field(repr=False)
    name: str = "Metadata link script"
    grant_types: list[str] = field(default_factory=lambda: list(DEFAULT_GRANT_TYPES))

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "cid": self.cid,
            "grantTypes": list(self.grant_types),
            "secret": self.secret,
        }


@dataclass
class TokenPair:
    """Access + refresh token returned by /uaa/oauth/token.

    No expiry tracking or refresh is done; the pair lives for the session.
    """

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)

    @property
    def authorization(self) -> str:
        """Value for the Authorization header of follow-up API calls."""
        return f"Bearer {self.access_token}"

    def to_dict(self) -> dict[str, str]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}
