"""
stalker2epg.downloader - HTTP transport

Sends portal requests over a persistent requests session. No retries, no
content decoding: the raw body is handed back so compression stays visible
to the portal clients. Failures while connecting or while reading the body
both surface as TransportError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict
from urllib3.exceptions import HTTPError as Urllib3Error
from urllib3.util.retry import Retry

from .errors import TransportError
from .request import PortalRequest, STB_USER_AGENT


@dataclass
class PortalResponse:
    """Status, headers and undecoded body of a portal reply"""

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_encoding(self) -> str:
        return self.headers.get("Content-Encoding", "").lower()


class PortalTransport:
    """Persistent HTTP session used by every portal client"""

    CHUNK_SIZE = 64 * 1024

    def __init__(self, timeout: float = 10.0):
        self.session: Optional[requests.Session] = None
        self.timeout = timeout
        self.total_requests = 0
        self.failed_requests = 0

        self.init_session()

    def init_session(self):
        """Initialize session with transport retries disabled"""
        if self.session:
            self.session.close()

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "*/*",
                "Connection": "keep-alive",
                "User-Agent": STB_USER_AGENT,
            }
        )

        adapter = HTTPAdapter(max_retries=Retry(total=0, backoff_factor=0, status_forcelist=[]))
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        logging.debug("Portal session initialized (timeout: %.1fs)", self.timeout)

    def send(self, request: PortalRequest) -> PortalResponse:
        """Send a portal request and return the raw reply"""
        self.total_requests += 1
        logging.debug("  %s -> %s %s", request.action, request.url, request.params)

        try:
            response = self.session.get(
                request.url,
                params=request.params,
                headers=request.headers,
                timeout=self.timeout,
                stream=True,
            )
            try:
                body = response.raw.read(decode_content=False)
            finally:
                response.close()
        except (requests.exceptions.RequestException, Urllib3Error) as e:
            self.failed_requests += 1
            raise TransportError(
                f"request to {request.url} failed", operation=request.action, cause=e
            ) from e

        logging.debug(
            "  %s <- HTTP %d, %d bytes, encoding=%s",
            request.action,
            response.status_code,
            len(body),
            response.headers.get("Content-Encoding", "none"),
        )
        return PortalResponse(response.status_code, CaseInsensitiveDict(response.headers), body)

    def stream(self, url: str, headers: Optional[Dict[str, str]] = None) -> Iterator[bytes]:
        """Yield the body of url in chunks"""
        self.total_requests += 1
        logging.debug("  stream <- %s", url)

        try:
            with self.session.get(url, headers=headers, timeout=self.timeout, stream=True) as response:
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                    if chunk:
                        yield chunk
        except (requests.exceptions.RequestException, Urllib3Error) as e:
            self.failed_requests += 1
            raise TransportError(f"download of {url} failed", operation="stream", cause=e) from e

    def close(self):
        """Clean shutdown"""
        if self.session:
            self.session.close()
            self.session = None

    def get_stats(self) -> Dict[str, Any]:
        """Get transport statistics"""
        return {
            "total_requests": self.total_requests,
            "failed_requests": self.failed_requests,
            "timeout": self.timeout,
        }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
