from stalker2epg.request import PORTAL_PATH, STB_USER_AGENT, RequestBuilder

from .conftest import MAC, PORTAL


def builder():
    return RequestBuilder(PORTAL + "/", MAC, "Europe/London")


def test_endpoint_strips_trailing_slash():
    assert builder().endpoint == PORTAL + PORTAL_PATH


def test_handshake_request():
    request = builder().handshake()

    assert request.params == [("type", "stb"), ("action", "handshake"), ("JsHttpRequest", "1-xml")]
    assert request.headers["Cookie"] == f"mac={MAC}; stb_lang=en; timezone=Europe/London"
    assert request.headers["User-Agent"] == STB_USER_AGENT
    assert "Authorization" not in request.headers


def test_channels_request_with_and_without_gzip():
    plain = builder().get_all_channels(token="abc")
    compressed = builder().get_all_channels(token="abc", gzip=True)

    assert plain.param("gzip") is None
    assert plain.headers["Accept-Encoding"] == "identity"
    assert plain.headers["Authorization"] == "Bearer abc"
    assert compressed.param("gzip") == "true"
    assert compressed.headers["Accept-Encoding"] == "gzip"
    assert compressed.params[-1] == ("JsHttpRequest", "1-xml")


def test_create_link_request_carries_fixed_params():
    request = builder().create_link("ffmpeg http://stream/1", token="abc")

    assert request.param("cmd") == "ffmpeg http://stream/1"
    assert request.param("forced_storage") == "undefined"
    assert request.param("disable_ad") == "0"
    assert request.headers["User-Agent"] == STB_USER_AGENT
    assert request.headers["Authorization"] == "Bearer abc"


def test_epg_request():
    request = builder().get_epg("42", token="abc")

    assert request.param("action") == "get_epg"
    assert request.param("ch_id") == "42"
    assert "User-Agent" not in request.headers


def test_logo_url():
    assert builder().logo_url("/misc/logos/1.png") == PORTAL + "/stalker_portal/misc/logos/1.png"
    assert builder().logo_url("misc/1.png") == PORTAL + "/stalker_portal/misc/1.png"
