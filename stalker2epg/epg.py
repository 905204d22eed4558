"""
stalker2epg.epg - Program guide client

Fetches program entries for one channel and normalizes their timestamps to the
configured timezone. Server order is preserved.

Input and output zone are currently the same configured zone, so the
normalization does not move any instant. Converting from a server-local zone to
a viewer zone would need the server zone tracked separately.
"""

import dataclasses
import logging
from typing import List

from .errors import DecodeError, EPGFetchError, TransportError
from .models import ProgramEntry
from .parser import parse_envelope, parse_programs
from .request import RequestBuilder
from .utils import TimeUtils


class EpgClient:
    """get_epg with timezone normalization"""

    def __init__(self, builder: RequestBuilder, transport, session):
        self.builder = builder
        self.transport = transport
        self.session = session

    def get_epg(self, channel_id: str) -> List[ProgramEntry]:
        zone = TimeUtils.resolve_timezone(self.builder.timezone)

        token = self.session.ensure_authenticated()
        request = self.builder.get_epg(channel_id, token=token)

        try:
            response = self.transport.send(request)
            if not response.ok:
                raise EPGFetchError(
                    f"HTTP {response.status_code}",
                    operation="get_epg",
                    status_code=response.status_code,
                )
            programs = parse_programs(parse_envelope(response, "get_epg"))
        except (TransportError, DecodeError) as e:
            raise EPGFetchError(
                f"guide for channel {channel_id} unavailable", operation="get_epg", cause=e
            ) from e

        try:
            programs = [
                dataclasses.replace(
                    program,
                    start=TimeUtils.reexpress(program.start, zone),
                    stop=TimeUtils.reexpress(program.stop, zone),
                )
                for program in programs
            ]
        except (ValueError, OverflowError, OSError) as e:
            # e.g. millisecond timestamps
            raise EPGFetchError(
                f"guide for channel {channel_id} has out of range timestamps",
                operation="get_epg",
                cause=e,
            ) from e
        logging.debug("  Channel %s: %d programs", channel_id, len(programs))
        return programs
