"""
stalker2epg.session - Session management

Holds the session state explicitly as Unauthenticated or Authenticated(token)
and performs the handshake. A token is never refreshed on its own: the portal
gives no expiry information, so callers that see a 401-equivalent reply call
invalidate() and the next operation handshakes again.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .errors import AuthError, DecodeError, TransportError
from .parser import parse_envelope, parse_token
from .request import RequestBuilder


@dataclass(frozen=True)
class Unauthenticated:
    pass


@dataclass(frozen=True)
class Authenticated:
    token: str


SessionState = Union[Unauthenticated, Authenticated]


class SessionManager:
    """Obtains and holds the bearer token for one client instance"""

    def __init__(self, builder: RequestBuilder, transport):
        self.builder = builder
        self.transport = transport
        self.state: SessionState = Unauthenticated()

    @property
    def token(self) -> Optional[str]:
        if isinstance(self.state, Authenticated):
            return self.state.token
        return None

    @property
    def is_authenticated(self) -> bool:
        return isinstance(self.state, Authenticated)

    def authenticate(self) -> str:
        """Perform the handshake and store the token; state is unchanged on failure"""
        request = self.builder.handshake()
        logging.info("Portal handshake: %s (mac %s)", self.builder.portal_url, self.builder.mac)

        try:
            response = self.transport.send(request)
            payload = parse_envelope(response, "handshake")
        except (TransportError, DecodeError) as e:
            raise AuthError("handshake failed", operation="handshake", cause=e) from e

        token = parse_token(payload)
        if not token:
            raise AuthError("handshake returned no token", operation="handshake")

        self.state = Authenticated(token)
        logging.debug("  Token obtained (%d chars)", len(token))
        return token

    def ensure_authenticated(self) -> str:
        """Return the current token, handshaking first when there is none"""
        if isinstance(self.state, Authenticated):
            return self.state.token
        logging.debug("No session token, authenticating")
        return self.authenticate()

    def invalidate(self):
        """Forget the current token"""
        if self.is_authenticated:
            logging.info("Session token invalidated")
        self.state = Unauthenticated()
