"""
stalker2epg.models - Value types shared by the portal clients

All records are immutable; clients build new instances instead of mutating.
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class ServerProfile:
    """Server capabilities inferred by probing"""

    supports_gzip: bool = False
    requires_link_indirection: bool = False


@dataclass(frozen=True)
class ChannelRecord:
    """A channel as delivered by get_all_channels"""

    id: str
    name: str
    cmd: str
    logo: str


@dataclass(frozen=True)
class ProgramEntry:
    """A single program guide entry; epochs are absolute UNIX timestamps"""

    channel_id: str
    title: str
    start: int
    stop: int
    description: str = ""
    category: str = ""


@dataclass(frozen=True)
class ChannelDeclaration:
    id: str
    display_name: str


@dataclass(frozen=True)
class ProgrammeDeclaration:
    channel: str
    start: str
    stop: str
    title: str
    desc: str
    category: str


@dataclass(frozen=True)
class InterchangeDocument:
    """XMLTV document content: channel declarations, then programme declarations"""

    channels: Tuple[ChannelDeclaration, ...] = field(default_factory=tuple)
    programmes: Tuple[ProgrammeDeclaration, ...] = field(default_factory=tuple)
