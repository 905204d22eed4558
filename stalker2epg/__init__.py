"""
stalker2epg - Stalker middleware portal client and XMLTV grabber

Authenticates against a Stalker portal, probes server quirks, lists channels,
resolves playback URLs, fetches program guides and converts them to XMLTV.
"""

__version__ = "1.0.0"
__author__ = "stalker2epg contributors"
__license__ = "GPL-3.0"

from .client import StalkerClient
from .config import ConfigManager
from .downloader import PortalResponse, PortalTransport
from .errors import (
    AuthError,
    ConfigError,
    ConversionError,
    DecodeError,
    EPGFetchError,
    FetchError,
    ResolveError,
    StalkerError,
    TimezoneError,
    TransportError,
)
from .models import (
    ChannelDeclaration,
    ChannelRecord,
    InterchangeDocument,
    ProgramEntry,
    ProgrammeDeclaration,
    ServerProfile,
)
from .session import Authenticated, Unauthenticated
from .xmltv import XmltvGenerator

__all__ = [
    "StalkerClient",
    "ConfigManager",
    "PortalResponse",
    "PortalTransport",
    "XmltvGenerator",
    "Authenticated",
    "Unauthenticated",
    "ServerProfile",
    "ChannelRecord",
    "ProgramEntry",
    "InterchangeDocument",
    "ChannelDeclaration",
    "ProgrammeDeclaration",
    "StalkerError",
    "TransportError",
    "DecodeError",
    "AuthError",
    "TimezoneError",
    "ConfigError",
    "FetchError",
    "ResolveError",
    "EPGFetchError",
    "ConversionError",
]
