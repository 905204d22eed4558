"""
Shared fixtures: a fake transport replaying canned portal replies per action
"""

import gzip
import json
from collections import defaultdict, deque

import pytest
from requests.structures import CaseInsensitiveDict

from stalker2epg import StalkerClient
from stalker2epg.downloader import PortalResponse
from stalker2epg.errors import TransportError

PORTAL = "http://portal.example.com"
MAC = "00:1A:79:00:00:01"


def json_response(payload, status_code=200, compress=False, headers=None):
    body = json.dumps(payload).encode("utf-8")
    response_headers = CaseInsensitiveDict(headers or {})
    response_headers.setdefault("Content-Type", "application/json")
    if compress:
        body = gzip.compress(body)
        response_headers["Content-Encoding"] = "gzip"
    return PortalResponse(status_code, response_headers, body)


def raw_response(body, status_code=200, headers=None):
    return PortalResponse(status_code, CaseInsensitiveDict(headers or {}), body)


class FakeTransport:
    """Replays queued replies per action; a queued exception is raised instead"""

    def __init__(self):
        self.replies = defaultdict(deque)
        self.sticky = {}
        self.requests = []
        self.streams = {}
        self.streamed = []

    def queue(self, action, *replies):
        self.replies[action].extend(replies)
        return self

    def always(self, action, reply):
        self.sticky[action] = reply
        return self

    def send(self, request):
        self.requests.append(request)
        if self.replies[request.action]:
            reply = self.replies[request.action].popleft()
        elif request.action in self.sticky:
            reply = self.sticky[request.action]
        else:
            raise AssertionError(f"unexpected request: {request.action}")
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def stream(self, url, headers=None):
        self.streamed.append(url)
        reply = self.streams.get(url)
        if reply is None:
            raise AssertionError(f"unexpected download: {url}")
        if isinstance(reply, BaseException):
            raise reply
        for chunk in reply:
            yield chunk

    def actions(self):
        return [request.action for request in self.requests]


class ForbiddenTransport:
    """Fails the test on any network use"""

    def send(self, request):
        pytest.fail(f"network call not expected: {request.action}")

    def stream(self, url, headers=None):
        pytest.fail(f"network call not expected: {url}")


def transport_error(action="test"):
    return TransportError("connection refused", operation=action, cause=ConnectionError("refused"))


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def handshake_ok():
    return json_response({"js": {"token": "TOKEN123"}})


@pytest.fixture
def client(transport):
    return StalkerClient(PORTAL, MAC, "UTC", transport=transport)


@pytest.fixture
def authed_client(transport, handshake_ok):
    transport.queue("handshake", handshake_ok)
    client = StalkerClient(PORTAL, MAC, "UTC", transport=transport)
    client.authenticate()
    return client
