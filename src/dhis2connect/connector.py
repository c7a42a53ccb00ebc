# DHIS2 Connector: OAuth2 client discovery/registration + password-grant token.
# Created: 2026-10-19

from __future__ import annotations

import logging
import secrets
import string
from typing import Any

import httpx

from dhis2connect.config import Settings, get_settings
from dhis2connect.errors import ConnectionFailure, DuplicateClientError, TokenFailure
from dhis2connect.models import ClientRegistration, Credentials, TokenPair, basic_auth

logger = logging.getLogger(__name__)

_SECRET_ALPHABET = string.ascii_lowercase + string.digits
# Group lengths of the secrets DHIS2 generates itself
_SECRET_GROUPS = (9, 4, 4, 4, 11)

# Failures while talking to the server or reading its reply
_RESPONSE_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError)


def generate_secret() -> str:
    """Random secret in the format DHIS2 uses for OAuth clients.

    Returns:
        A string matching ``[a-z0-9]{9}-[a-z0-9]{4}-[a-z0-9]{4}-[a-z0-9]{4}-[a-z0-9]{11}``.
    """
    return "-".join(
        "".join(secrets.choice(_SECRET_ALPHABET) for _ in range(length))
        for length in _SECRET_GROUPS
    )


class DHIS2Connector:
    """Authenticate against a DHIS2 server with the OAuth2 password grant.

    The handshake is three sequential requests:
    - look up the OAuth client registered under ``client_id``
    - register it with a fresh secret if it does not exist yet
    - exchange the user's credentials + client secret for a token pair

    Two concurrent ``connect`` calls against a server with no client yet can
    both register one; nothing here serialises them.
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_name: str | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.client_id = client_id or settings.client_id
        self.client_name = client_name or settings.client_name
        self.timeout = timeout if timeout is not None else settings.request_timeout
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    async def resolve_client_secret(self, base_url: str, basic_auth_header: str) -> str:
        """Get the secret of this app's OAuth client, registering it if missing.

        Args:
            base_url: DHIS2 server root, e.g. ``https://play.dhis2.org/2.37.3``.
            basic_auth_header: Base64 ``username:password`` of a user allowed
                to read and create OAuth clients.

        Returns:
            The client secret.

        Raises:
            DuplicateClientError: More than one client has our cid.
            ConnectionFailure: The server could not be reached or its reply
                could not be read.
        """
        base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Basic {basic_auth_header}"}

        try:
            clients = await self._find_clients(base_url, headers)
        except _RESPONSE_ERRORS as e:
            logger.warning("OAuth client lookup failed on %s: %s", base_url, e)
            raise ConnectionFailure(base_url) from e

        if len(clients) > 1:
            logger.warning(
                "%d OAuth clients registered as %s on %s", len(clients), self.client_id, base_url
            )
            raise DuplicateClientError(base_url, self.client_id, len(clients))

        if len(clients) == 1:
            secret = clients[0].get("secret") if isinstance(clients[0], dict) else None
            if not secret:
                logger.warning(
                    "OAuth client %s on %s has no readable secret", self.client_id, base_url
                )
                raise ConnectionFailure(base_url)
            return secret

        registration = ClientRegistration(
            cid=self.client_id,
            secret=generate_secret(),
            name=self.client_name,
        )
        try:
            await self._register_client(base_url, headers, registration)
        except _RESPONSE_ERRORS as e:
            logger.warning("OAuth client registration failed on %s: %s", base_url, e)
            raise ConnectionFailure(base_url) from e

        logger.info("Registered OAuth client %s on %s", self.client_id, base_url)
        return registration.secret

    async def request_token(
        self, base_url: str, username: str, password: str, secret: str
    ) -> TokenPair:
        """Exchange user credentials for an access + refresh token pair.

        Raises:
            TokenFailure: The reply lacks ``access_token`` or ``refresh_token``,
                or the request itself failed.
        """
        base_url = base_url.rstrip("/")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    f"{base_url}/uaa/oauth/token",
                    headers={"Authorization": f"Basic {basic_auth(self.client_id, secret)}"},
                    json={"username": username, "password": password, "grantType": "password"},
                )
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Token request to %s failed: %s", base_url, e)
            raise TokenFailure(base_url) from e

        if not isinstance(data, dict) or not {"access_token", "refresh_token"} <= data.keys():
            logger.warning("Token response from %s is missing token fields", base_url)
            raise TokenFailure(base_url)

        access, refresh = data["access_token"], data["refresh_token"]
        if not (isinstance(access, str) and access and isinstance(refresh, str) and refresh):
            logger.warning("Token response from %s has empty or non-string tokens", base_url)
            raise TokenFailure(base_url)

        return TokenPair(access_token=access, refresh_token=refresh)

    async def connect(self, base_url: str, username: str, password: str) -> TokenPair:
        """Run the full handshake and return the token pair."""
        credentials = Credentials(username=username, password=password)
        secret = await self.resolve_client_secret(base_url, credentials.basic_auth)
        tokens = await self.request_token(base_url, username, password, secret)
        logger.info("Obtained bearer token for %s on %s", username, base_url.rstrip("/"))
        return tokens

    async def _find_clients(
        self, base_url: str, headers: dict[str, str]
    ) -> list[dict[str, Any]]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(
                f"{base_url}/api/oAuth2Clients",
                params={"fields": "name,secret", "filter": f"cid:eq:{self.client_id}"},
                headers=headers,
            )
            resp.raise_for_status()
            data = resp.json()
        clients = data["oAuth2Clients"]
        if not isinstance(clients, list):
            raise TypeError(f"oAuth2Clients is {type(clients).__name__}, expected list")
        return clients

    async def _register_client(
        self, base_url: str, headers: dict[str, str], registration: ClientRegistration
    ) -> None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{base_url}/api/oAuth2Clients",
                headers=headers,
                json=registration.to_payload(),
            )
            resp.raise_for_status()


async def dhis2_connect(
    base_url: str, username: str, password: str, *, settings: Settings | None = None
) -> TokenPair:
    """One-shot handshake with a connector built from settings."""
    connector = DHIS2Connector(settings=settings)
    return await connector.connect(base_url, username, password)
