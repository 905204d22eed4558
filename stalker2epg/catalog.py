"""
stalker2epg.catalog - Channel catalog client

Fetches the channel list and resolves per-channel playback URLs, branching on
the probed server profile.
"""

import logging
from typing import List

from .errors import DecodeError, FetchError, ResolveError, TransportError
from .models import ChannelRecord
from .parser import parse_channels, parse_cmd, parse_envelope
from .request import RequestBuilder


class CatalogClient:
    """Channel list and playback URL resolution"""

    def __init__(self, builder: RequestBuilder, transport, session, prober):
        self.builder = builder
        self.transport = transport
        self.session = session
        self.prober = prober

    def get_channels(self) -> List[ChannelRecord]:
        """Fetch all channels; an empty list is not an error"""
        token = self.session.ensure_authenticated()
        request = self.builder.get_all_channels(
            token=token, gzip=self.prober.profile.supports_gzip
        )

        try:
            response = self.transport.send(request)
            if not response.ok:
                raise FetchError(
                    f"HTTP {response.status_code}",
                    operation="get_all_channels",
                    status_code=response.status_code,
                )
            channels = parse_channels(parse_envelope(response, "get_all_channels"))
        except (TransportError, DecodeError) as e:
            raise FetchError(
                "channel list unavailable", operation="get_all_channels", cause=e
            ) from e

        logging.info("%d channels found", len(channels))
        return channels

    def resolve_playback_url(self, cmd: str) -> str:
        """Return a playable URL for a channel command"""
        if not self.prober.profile.requires_link_indirection:
            return cmd

        token = self.session.ensure_authenticated()
        request = self.builder.create_link(cmd, token=token)

        try:
            response = self.transport.send(request)
            if not response.ok:
                raise ResolveError(
                    f"HTTP {response.status_code}",
                    operation="create_link",
                    status_code=response.status_code,
                )
            url = parse_cmd(parse_envelope(response, "create_link"))
        except (TransportError, DecodeError) as e:
            raise ResolveError(f"cannot resolve {cmd!r}", operation="create_link", cause=e) from e

        logging.debug("  Resolved %s -> %s", cmd, url)
        return url
