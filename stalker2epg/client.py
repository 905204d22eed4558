"""
stalker2epg.client - Stalker portal client

Facade wiring the request builder, transport, session, prober and the catalog,
EPG, XMLTV and logo components for one portal and device identity.

One instance holds one session token and one server profile. Instances share
no state; calls on a single instance must be serialized by the caller.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .catalog import CatalogClient
from .downloader import PortalTransport
from .epg import EpgClient
from .logos import DEFAULT_FILENAME_TEMPLATE, LogoFetcher
from .models import ChannelRecord, InterchangeDocument, ProgramEntry, ServerProfile
from .prober import CapabilityProber
from .request import RequestBuilder
from .session import SessionManager
from .xmltv import XmltvGenerator


class StalkerClient:
    """Client for one Stalker middleware portal"""

    def __init__(self, portal_url: str, mac: str, timezone: str = "UTC", transport=None):
        self.builder = RequestBuilder(portal_url, mac, timezone)
        self.transport = transport if transport is not None else PortalTransport()

        self.session = SessionManager(self.builder, self.transport)
        self.prober = CapabilityProber(self.builder, self.transport, self.session)
        self.catalog = CatalogClient(self.builder, self.transport, self.session, self.prober)
        self.epg = EpgClient(self.builder, self.transport, self.session)
        self.xmltv = XmltvGenerator(timezone)
        self.logos = LogoFetcher(self.builder, self.transport)

        logging.debug("Stalker client created for %s (timezone %s)", portal_url, timezone)

    @property
    def portal_url(self) -> str:
        return self.builder.portal_url

    @property
    def mac(self) -> str:
        return self.builder.mac

    @property
    def timezone(self) -> str:
        return self.builder.timezone

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    @property
    def profile(self) -> ServerProfile:
        return self.prober.profile

    def authenticate(self) -> str:
        return self.session.authenticate()

    def invalidate(self):
        self.session.invalidate()

    def probe(self) -> ServerProfile:
        return self.prober.probe()

    def get_channels(self) -> List[ChannelRecord]:
        return self.catalog.get_channels()

    def resolve_playback_url(self, cmd: str) -> str:
        return self.catalog.resolve_playback_url(cmd)

    def get_epg(self, channel_id: str) -> List[ProgramEntry]:
        return self.epg.get_epg(channel_id)

    def to_interchange(
        self, channel_id: str, programs: Iterable[ProgramEntry]
    ) -> InterchangeDocument:
        return self.xmltv.to_interchange(channel_id, programs)

    def to_xmltv(self, channel_id: str, programs: Iterable[ProgramEntry]) -> str:
        """Interchange document for one channel, rendered as XMLTV text"""
        return self.xmltv.render(self.to_interchange(channel_id, programs))

    def download_channel_logo(
        self,
        channel: ChannelRecord,
        output_dir: Path,
        filename_template: str = DEFAULT_FILENAME_TEMPLATE,
    ) -> Path:
        return self.logos.download_logo(channel, output_dir, filename_template)

    def close(self):
        if hasattr(self.transport, "close"):
            self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
