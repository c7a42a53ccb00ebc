"""dhis2connect: obtain OAuth2 bearer tokens from a DHIS2 server."""

from dhis2connect.connector import DHIS2Connector, dhis2_connect, generate_secret
from dhis2connect.errors import ConnectionFailure, DuplicateClientError, TokenFailure
from dhis2connect.models import ClientRegistration, Credentials, TokenPair, basic_auth

__all__ = [
    "ClientRegistration",
    "ConnectionFailure",
    "Credentials",
    "DHIS2Connector",
    "DuplicateClientError",
    "TokenFailure",
    "TokenPair",
    "basic_auth",
    "dhis2_connect",
    "generate_secret",
]
