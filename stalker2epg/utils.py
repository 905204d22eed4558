"""
stalker2epg.utils - Time, markup and filename helpers

Provides the single timezone resolution used by both the EPG client and the
XMLTV converter, XMLTV time formatting and XML entity escaping.
"""

import html
import logging
import re
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import TimezoneError

XMLTV_TIME_FORMAT = "%Y%m%d%H%M%S %z"


class TimeUtils:
    """Time and timezone utilities"""

    @staticmethod
    def resolve_timezone(name: str) -> tzinfo:
        """Resolve an IANA timezone identifier, raising TimezoneError when unknown"""
        if not name or not name.strip():
            raise TimezoneError("No timezone configured", operation="resolve_timezone")
        try:
            return ZoneInfo(name.strip())
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise TimezoneError(
                f"Unknown timezone '{name}'", operation="resolve_timezone", cause=e
            ) from e

    @staticmethod
    def reexpress(timestamp: int, zone: tzinfo) -> int:
        """Read a UNIX timestamp as an instant in zone and return it as UNIX time again"""
        return int(datetime.fromtimestamp(int(timestamp), zone).timestamp())

    @staticmethod
    def conv_time(timestamp: int, zone: tzinfo) -> str:
        """Convert timestamp to XMLTV time format: YYYYMMDDHHmmss +HHMM"""
        return datetime.fromtimestamp(int(timestamp), zone).strftime(XMLTV_TIME_FORMAT)


class HtmlUtils:
    """HTML/XML utilities"""

    @staticmethod
    def conv_html(data) -> str:
        """Convert data to XML-safe text with entity normalization"""
        if data is None:
            return ""

        data = html.unescape(str(data))

        data = data.replace("&", "&amp;")
        data = data.replace('"', "&quot;")
        data = data.replace("'", "&apos;")
        data = data.replace("<", "&lt;")
        data = data.replace(">", "&gt;")

        return data


class FileUtils:
    """Filename helpers"""

    UNSAFE_CHARS = re.compile(r"[\\/*?:|<>\"]")

    @staticmethod
    def safe_filename(value: str) -> str:
        """Replace characters that are not allowed in filenames"""
        cleaned = FileUtils.UNSAFE_CHARS.sub("_", str(value)).strip()
        if cleaned != value:
            logging.debug("  Filename sanitized: %r -> %r", value, cleaned)
        return cleaned
