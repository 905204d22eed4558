"""
stalker2epg.request - Portal request builder

Builds protocol-correct requests (URL, query parameters, headers) for every
supported portal action. Pure: nothing here touches the network.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

PORTAL_PATH = "/stalker_portal/server/load.php"
LOGO_PATH = "/stalker_portal"

# Portals only answer set-top boxes
STB_USER_AGENT = "Mozilla/5.0 (QtEmbedded; U; Linux; C)"

PROBE_COMMAND = "test_channel"


@dataclass(frozen=True)
class PortalRequest:
    """A GET request against the portal endpoint"""

    action: str
    url: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)

    def param(self, name: str) -> Optional[str]:
        for key, value in self.params:
            if key == name:
                return value
        return None


class RequestBuilder:
    """Builds portal requests for a given device identity"""

    def __init__(self, portal_url: str, mac: str, timezone: str):
        self.portal_url = portal_url.rstrip("/")
        self.mac = mac
        self.timezone = timezone
        self.endpoint = f"{self.portal_url}{PORTAL_PATH}"

    def _headers(
        self, token: Optional[str] = None, stb_agent: bool = False, gzip: bool = False
    ) -> Dict[str, str]:
        headers = {
            "Cookie": f"mac={self.mac}; stb_lang=en; timezone={self.timezone}",
            "Accept-Encoding": "gzip" if gzip else "identity",
        }
        if stb_agent:
            headers["User-Agent"] = STB_USER_AGENT
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def handshake(self) -> PortalRequest:
        params = [("type", "stb"), ("action", "handshake"), ("JsHttpRequest", "1-xml")]
        return PortalRequest("handshake", self.endpoint, params, self._headers(stb_agent=True))

    def get_all_channels(self, token: Optional[str] = None, gzip: bool = False) -> PortalRequest:
        params = [("type", "itv"), ("action", "get_all_channels")]
        if gzip:
            params.append(("gzip", "true"))
        params.append(("JsHttpRequest", "1-xml"))
        return PortalRequest(
            "get_all_channels", self.endpoint, params, self._headers(token=token, gzip=gzip)
        )

    def create_link(self, cmd: str, token: Optional[str] = None) -> PortalRequest:
        params = [
            ("type", "itv"),
            ("action", "create_link"),
            ("cmd", cmd),
            ("forced_storage", "undefined"),
            ("disable_ad", "0"),
            ("JsHttpRequest", "1-xml"),
        ]
        return PortalRequest(
            "create_link", self.endpoint, params, self._headers(token=token, stb_agent=True)
        )

    def get_epg(self, channel_id: str, token: Optional[str] = None) -> PortalRequest:
        params = [
            ("type", "itv"),
            ("action", "get_epg"),
            ("ch_id", channel_id),
            ("JsHttpRequest", "1-xml"),
        ]
        return PortalRequest("get_epg", self.endpoint, params, self._headers(token=token))

    def logo_url(self, logo: str) -> str:
        """Absolute URL for a portal-relative logo path"""
        if not logo.startswith("/"):
            logo = f"/{logo}"
        return f"{self.portal_url}{LOGO_PATH}{logo}"
