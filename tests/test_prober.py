from stalker2epg.models import ServerProfile
from stalker2epg.request import PROBE_COMMAND

from .conftest import json_response, raw_response, transport_error

CHANNELS = {"js": {"channels": []}}


def test_gzip_detected_from_content_encoding(client, transport):
    transport.queue("get_all_channels", json_response(CHANNELS, compress=True))
    transport.queue("create_link", json_response({"js": {"cmd": ""}}))

    profile = client.probe()

    assert profile.supports_gzip is True
    gzip_request = transport.requests[0]
    assert gzip_request.param("gzip") == "true"
    assert gzip_request.headers["Accept-Encoding"] == "gzip"


def test_uncompressed_reply_means_no_gzip(client, transport):
    transport.queue("get_all_channels", json_response(CHANNELS))
    transport.queue("create_link", json_response({"js": {"cmd": ""}}))

    assert client.probe().supports_gzip is False


def test_transport_errors_keep_prior_values_and_do_not_raise(client, transport):
    transport.queue("get_all_channels", transport_error("get_all_channels"))
    transport.queue("create_link", transport_error("create_link"))

    assert client.probe() == ServerProfile(False, False)


def test_transport_error_keeps_previously_probed_value(client, transport):
    transport.queue("get_all_channels", json_response(CHANNELS, compress=True))
    transport.queue("create_link", json_response({"js": {"cmd": "http://x/live"}}))
    transport.queue("get_all_channels", transport_error("get_all_channels"))
    transport.queue("create_link", json_response({"js": {"cmd": ""}}))

    client.probe()
    profile = client.probe()

    assert profile.supports_gzip is True
    assert profile.requires_link_indirection is False


def test_indirection_detected_from_non_empty_cmd(client, transport):
    transport.queue("get_all_channels", json_response(CHANNELS))
    transport.queue("create_link", json_response({"js": {"cmd": "ffmpeg http://s/test"}}))

    assert client.probe().requires_link_indirection is True
    link_request = transport.requests[1]
    assert link_request.param("cmd") == PROBE_COMMAND


def test_indirection_requires_http_200_and_valid_json(client, transport):
    transport.queue("get_all_channels", json_response(CHANNELS), json_response(CHANNELS))
    transport.queue(
        "create_link",
        json_response({"js": {"cmd": "http://x"}}, status_code=500),
        raw_response(b"not json"),
    )

    assert client.probe().requires_link_indirection is False
    assert client.probe().requires_link_indirection is False


def test_probe_is_idempotent(client, transport):
    transport.always("get_all_channels", json_response(CHANNELS, compress=True))
    transport.always("create_link", json_response({"js": {"cmd": "http://x"}}))

    first = client.probe()
    second = client.probe()

    assert first == second == ServerProfile(True, True)


def test_probe_uses_token_when_authenticated(authed_client, transport):
    transport.always("get_all_channels", json_response(CHANNELS))
    transport.always("create_link", json_response({"js": {"cmd": ""}}))

    authed_client.probe()

    assert all(r.headers["Authorization"] == "Bearer TOKEN123" for r in transport.requests[1:])


def test_probe_never_handshakes(client, transport):
    transport.always("get_all_channels", json_response(CHANNELS))
    transport.always("create_link", json_response({"js": {"cmd": ""}}))

    client.probe()

    assert "handshake" not in transport.actions()
    assert all("Authorization" not in r.headers for r in transport.requests)
