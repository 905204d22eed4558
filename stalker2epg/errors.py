"""
stalker2epg.errors - Error taxonomy

Every error carries the failing operation and the underlying cause. Nothing in
this package retries; callers decide what to do with a failure.
"""

from typing import Optional


class StalkerError(Exception):
    """Base class for all stalker2epg errors"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.cause = cause
        self.status_code = status_code

    def __str__(self) -> str:
        message = super().__str__()
        if self.operation:
            message = f"{self.operation}: {message}"
        if self.cause is not None:
            message = f"{message} ({self.cause})"
        return message


# Kinds


class TransportError(StalkerError):
    """Connection or send failure"""


class DecodeError(StalkerError):
    """Malformed or unexpected JSON/XML payload"""


class AuthError(StalkerError):
    """Handshake could not be sent or decoded"""


class TimezoneError(StalkerError):
    """Timezone identifier cannot be resolved"""


class ConfigError(StalkerError):
    """Missing or invalid required input"""


# Operation errors


class FetchError(StalkerError):
    """Channel list retrieval failed"""


class ResolveError(StalkerError):
    """Playback URL resolution (create_link) failed"""


class EPGFetchError(StalkerError):
    """Program guide retrieval failed"""


class ConversionError(StalkerError):
    """EPG to XMLTV conversion failed"""
