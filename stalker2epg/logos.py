"""
stalker2epg.logos - Channel logo retrieval

Resolves logo references against the portal, expands the filename template and
hands the downloaded bytes to a save_stream collaborator.
"""

import logging
import string
from pathlib import Path
from typing import Callable, Iterable, Optional
from urllib.parse import urlparse

from .errors import ConfigError, TransportError
from .models import ChannelRecord
from .request import RequestBuilder
from .utils import FileUtils

DEFAULT_FILENAME_TEMPLATE = "{id}.png"
TEMPLATE_FIELDS = ("id", "name")


def save_stream(chunks: Iterable[bytes], path: Path) -> int:
    """Write byte chunks to path, returning the number of bytes written"""
    written = 0
    with open(path, "wb") as f:
        for chunk in chunks:
            f.write(chunk)
            written += len(chunk)
    return written


def render_filename(template: str, channel: ChannelRecord) -> str:
    """Expand {id} and {name} in template; any other placeholder is rejected"""
    try:
        fields = [name for _, name, _, _ in string.Formatter().parse(template) if name is not None]
    except ValueError as e:
        raise ConfigError(f"invalid filename template {template!r}", operation="logo", cause=e) from e

    for name in fields:
        if name not in TEMPLATE_FIELDS:
            raise ConfigError(
                f"unknown placeholder {{{name}}} in filename template, use {{id}} or {{name}}",
                operation="logo",
            )

    filename = FileUtils.safe_filename(
        template.format(
            id=FileUtils.safe_filename(channel.id),
            name=FileUtils.safe_filename(channel.name),
        )
    )
    if not filename:
        raise ConfigError(f"filename template {template!r} expands to nothing", operation="logo")
    return filename


class LogoFetcher:
    """Downloads channel logos to a local directory"""

    def __init__(
        self,
        builder: RequestBuilder,
        transport,
        saver: Callable[[Iterable[bytes], Path], int] = save_stream,
    ):
        self.builder = builder
        self.transport = transport
        self.saver = saver
        self.downloaded_count = 0

    def resolve_url(self, logo: str) -> str:
        """Absolute URLs are kept, anything else is resolved under the portal"""
        if not logo or not logo.strip():
            raise ConfigError("no logo URL provided", operation="logo")
        parsed = urlparse(logo)
        if parsed.scheme and parsed.netloc:
            return logo
        return self.builder.logo_url(logo)

    def download_logo(
        self,
        channel: ChannelRecord,
        output_dir: Path,
        filename_template: str = DEFAULT_FILENAME_TEMPLATE,
        logo: Optional[str] = None,
    ) -> Path:
        """Download the logo of channel (or the given logo reference) into output_dir"""
        reference = channel.logo if logo is None else logo
        if not reference:
            raise ConfigError(f"no logo URL provided for channel {channel.name}", operation="logo")

        url = self.resolve_url(reference)
        filename = render_filename(filename_template, channel)

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / filename

        try:
            written = self.saver(self.transport.stream(url), target)
        except TransportError:
            if target.exists():
                target.unlink()
            raise
        self.downloaded_count += 1
        logging.debug("  Logo %s -> %s (%d bytes)", url, target, written)
        return target
