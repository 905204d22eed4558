"""
stalker2epg.parser - Portal envelope decoding

Pure decoding of portal replies: body inflation, the {"js": {...}} envelope
and the action-specific payloads. No HTTP here.
"""

import gzip
import json
import logging
import zlib
from typing import Any, Dict, List

from .downloader import PortalResponse
from .errors import DecodeError
from .models import ChannelRecord, ProgramEntry


def inflate_body(response: PortalResponse, operation: str) -> bytes:
    """Gunzip the body when the server says it compressed it"""
    if "gzip" not in response.content_encoding:
        return response.body
    try:
        body = gzip.decompress(response.body)
    except (OSError, EOFError, zlib.error) as e:
        raise DecodeError("corrupt gzip body", operation=operation, cause=e) from e
    logging.debug("  %s: inflated %d -> %d bytes", operation, len(response.body), len(body))
    return body


def parse_envelope(response: PortalResponse, operation: str) -> Dict[str, Any]:
    """Return the js object of a portal reply"""
    body = inflate_body(response, operation)
    try:
        document = json.loads(body)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError("response is not valid JSON", operation=operation, cause=e) from e

    if not isinstance(document, dict) or not isinstance(document.get("js"), dict):
        raise DecodeError("response has no js object", operation=operation)
    return document["js"]


def _text(record: Dict[str, Any], key: str) -> str:
    value = record.get(key)
    return "" if value is None else str(value)


def _epoch(record: Dict[str, Any], key: str, operation: str) -> int:
    value = record.get(key)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"invalid {key}: {value!r}", operation=operation, cause=e) from e


def _records(payload: Dict[str, Any], key: str, operation: str) -> List[Dict[str, Any]]:
    records = payload.get(key)
    if records is None:
        return []
    if not isinstance(records, list):
        raise DecodeError(f"{key} is not a list", operation=operation)
    for record in records:
        if not isinstance(record, dict):
            raise DecodeError(f"{key} entry is not an object", operation=operation)
    return records


def parse_token(payload: Dict[str, Any]) -> str:
    return _text(payload, "token")


def parse_cmd(payload: Dict[str, Any]) -> str:
    return _text(payload, "cmd")


def parse_channels(payload: Dict[str, Any]) -> List[ChannelRecord]:
    return [
        ChannelRecord(
            id=_text(record, "id"),
            name=_text(record, "name"),
            cmd=_text(record, "cmd"),
            logo=_text(record, "logo"),
        )
        for record in _records(payload, "channels", "get_all_channels")
    ]


def parse_programs(payload: Dict[str, Any]) -> List[ProgramEntry]:
    return [
        ProgramEntry(
            channel_id=_text(record, "ch_id"),
            title=_text(record, "name"),
            start=_epoch(record, "start_timestamp", "get_epg"),
            stop=_epoch(record, "stop_timestamp", "get_epg"),
            description=_text(record, "descr"),
            category=_text(record, "category"),
        )
        for record in _records(payload, "programs", "get_epg")
    ]
