"""
stalker2epg.xmltv - XMLTV generation

Converts normalized program entries into XMLTV interchange documents and
renders them as UTF-8 XML. Conversion is pure; only generate_xmltv() touches
the filesystem.
"""

import logging
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import ConversionError, TimezoneError
from .models import (
    ChannelDeclaration,
    InterchangeDocument,
    ProgramEntry,
    ProgrammeDeclaration,
)
from .utils import HtmlUtils, TimeUtils


class XmltvGenerator:
    """Builds and writes XMLTV documents for one configured timezone"""

    def __init__(self, timezone: str, generator_name: str = "stalker2epg"):
        self.timezone = timezone
        self.generator_name = generator_name
        self.station_count = 0
        self.episode_count = 0

    def to_interchange(
        self, channel_id: str, programs: Iterable[ProgramEntry]
    ) -> InterchangeDocument:
        """Build one channel declaration and one programme per entry, in input order"""
        try:
            zone = TimeUtils.resolve_timezone(self.timezone)
        except TimezoneError as e:
            raise ConversionError(
                "cannot convert guide", operation="to_interchange", cause=e
            ) from e

        # No human-readable name is known here, the id doubles as display name
        channel = ChannelDeclaration(id=channel_id, display_name=channel_id)
        try:
            programmes = tuple(
                ProgrammeDeclaration(
                    channel=program.channel_id or channel_id,
                    start=TimeUtils.conv_time(program.start, zone),
                    stop=TimeUtils.conv_time(program.stop, zone),
                    title=program.title,
                    desc=program.description,
                    category=program.category,
                )
                for program in programs
            )
        except (ValueError, OverflowError, OSError) as e:
            raise ConversionError(
                f"programme time out of range for channel {channel_id}",
                operation="to_interchange",
                cause=e,
            ) from e
        return InterchangeDocument(channels=(channel,), programmes=programmes)

    @staticmethod
    def merge(documents: Iterable[InterchangeDocument]) -> InterchangeDocument:
        """Concatenate documents, keeping the first declaration of each channel id"""
        channels: List[ChannelDeclaration] = []
        programmes: List[ProgrammeDeclaration] = []
        seen = set()

        for document in documents:
            for channel in document.channels:
                if channel.id not in seen:
                    seen.add(channel.id)
                    channels.append(channel)
            programmes.extend(document.programmes)

        return InterchangeDocument(channels=tuple(channels), programmes=tuple(programmes))

    def render(self, document: InterchangeDocument, encoding: str = "utf-8") -> str:
        """Render a document as indented XMLTV text"""
        lines = [
            f'<?xml version="1.0" encoding="{encoding}"?>',
            '<!DOCTYPE tv SYSTEM "xmltv.dtd">',
            f'<tv generator-info-name="{HtmlUtils.conv_html(self.generator_name)}">',
        ]

        for channel in document.channels:
            lines.append(f'\t<channel id="{HtmlUtils.conv_html(channel.id)}">')
            lines.append(
                f"\t\t<display-name>{HtmlUtils.conv_html(channel.display_name)}</display-name>"
            )
            lines.append("\t</channel>")

        for programme in document.programmes:
            lines.append(
                f'\t<programme start="{programme.start}" stop="{programme.stop}" '
                f'channel="{HtmlUtils.conv_html(programme.channel)}">'
            )
            lines.append(f"\t\t<title>{HtmlUtils.conv_html(programme.title)}</title>")
            lines.append(f"\t\t<desc>{HtmlUtils.conv_html(programme.desc)}</desc>")
            lines.append(f"\t\t<category>{HtmlUtils.conv_html(programme.category)}</category>")
            lines.append("\t</programme>")

        lines.append("</tv>")
        return "\n".join(lines) + "\n"

    def generate_xmltv(
        self, documents: Iterable[InterchangeDocument], xmltv_file: Optional[Path] = None
    ) -> InterchangeDocument:
        """Merge documents and write them to xmltv_file, or stdout when None"""
        logging.info("=== XMLTV Generation ===")
        document = self.merge(documents)
        self.station_count = len(document.channels)
        self.episode_count = len(document.programmes)
        text = self.render(document)

        if xmltv_file is None:
            sys.stdout.write(text)
            sys.stdout.flush()
        else:
            xmltv_file = Path(xmltv_file)
            xmltv_file.parent.mkdir(parents=True, exist_ok=True)
            self.backup_xmltv(xmltv_file)
            with open(xmltv_file, "w", encoding="utf-8") as f:
                f.write(text)
            logging.info(
                "XMLTV file created: %s (%d bytes)", xmltv_file.name, xmltv_file.stat().st_size
            )

        logging.info(
            "XMLTV statistics: Stations=%d, Programmes=%d", self.station_count, self.episode_count
        )
        return document

    @staticmethod
    def backup_xmltv(xmltv_file: Path) -> Optional[Path]:
        """Copy an existing XMLTV file aside before it is overwritten"""
        if not xmltv_file.exists():
            logging.info("No existing XMLTV file to backup - first run")
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_file = xmltv_file.with_suffix(f".xml.{timestamp}")
        shutil.copy2(xmltv_file, backup_file)
        logging.info("XMLTV backed up: %s", backup_file.name)
        return backup_file
