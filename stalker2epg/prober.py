"""
stalker2epg.prober - Server capability probing

Portals have no capability negotiation, so two capabilities are inferred from
trial requests:

- gzip: the channel list is requested with gzip=true and Accept-Encoding: gzip;
  the server supports gzip when its Content-Encoding echoes gzip.
- link indirection: create_link is sent with a placeholder command; a 200 reply
  carrying a non-empty cmd means channel commands must always go through
  create_link.

The indirection test is a heuristic. A server that answers any input with a
non-empty cmd is taken to require indirection for every channel, so servers that
echo bad input gracefully produce a false positive, and servers that need
indirection only for some channel types are not distinguished.

Probing is advisory. A trial that fails at the transport level keeps the prior
value of its flag and is logged at debug level; probe() never raises.
"""

import logging
from typing import Optional

from .errors import DecodeError, TransportError
from .models import ServerProfile
from .parser import parse_cmd, parse_envelope
from .request import PROBE_COMMAND, RequestBuilder


class CapabilityProber:
    """Best-effort detector for gzip support and create_link indirection"""

    def __init__(self, builder: RequestBuilder, transport, session=None):
        self.builder = builder
        self.transport = transport
        self.session = session
        self.profile = ServerProfile()

    def _token(self) -> Optional[str]:
        return self.session.token if self.session is not None else None

    def probe(self) -> ServerProfile:
        """Re-derive both capability flags and install the resulting profile"""
        logging.info("Probing portal capabilities: %s", self.builder.portal_url)

        supports_gzip = self._probe_gzip(self.profile.supports_gzip)
        requires_link = self._probe_indirection(self.profile.requires_link_indirection)

        self.profile = ServerProfile(
            supports_gzip=supports_gzip, requires_link_indirection=requires_link
        )
        logging.info(
            "  gzip: %s, create_link required: %s",
            "yes" if supports_gzip else "no",
            "yes" if requires_link else "no",
        )
        return self.profile

    def _probe_gzip(self, prior: bool) -> bool:
        request = self.builder.get_all_channels(token=self._token(), gzip=True)
        try:
            response = self.transport.send(request)
        except TransportError as e:
            logging.debug("  gzip probe failed, keeping %s: %s", prior, e)
            return prior
        return "gzip" in response.content_encoding

    def _probe_indirection(self, prior: bool) -> bool:
        request = self.builder.create_link(PROBE_COMMAND, token=self._token())
        try:
            response = self.transport.send(request)
        except TransportError as e:
            logging.debug("  create_link probe failed, keeping %s: %s", prior, e)
            return prior

        if response.status_code != 200:
            logging.debug("  create_link probe returned HTTP %d", response.status_code)
            return False
        try:
            cmd = parse_cmd(parse_envelope(response, "create_link"))
        except DecodeError as e:
            logging.debug("  create_link probe reply not decodable: %s", e)
            return False
        return bool(cmd)
