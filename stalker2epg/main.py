#!/usr/bin/env python3
"""
stalker2epg - Stalker portal XMLTV grabber

Loads the configuration, authenticates against the portal, fetches the guide of
every selected channel and writes one XMLTV document.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from .args import ArgumentParser
from .client import StalkerClient
from .config import ConfigManager
from .downloader import PortalTransport
from .errors import ConfigError, EPGFetchError, StalkerError, TransportError
from .models import ChannelRecord, InterchangeDocument

from . import __version__


def setup_logging(logging_config: dict):
    """Setup logging to an optional file and stderr; stdout is kept for XML"""
    if logging_config["level"] == "warning":
        level = logging.WARNING
    elif logging_config["level"] == "debug":
        level = logging.DEBUG
    else:
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    log_file: Optional[Path] = logging_config.get("log_file")
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(message)s", datefmt="%Y/%m/%d %H:%M:%S"
            )
        )
        root_logger.addHandler(file_handler)

    if logging_config["console"] and not logging_config["quiet"]:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(console_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())


def select_channels(
    channels: List[ChannelRecord], wanted: Optional[List[str]]
) -> List[ChannelRecord]:
    """Keep the channels listed in wanted (all when None), in portal order"""
    if wanted is None:
        return channels

    selected = [channel for channel in channels if channel.id in wanted]
    missing = set(wanted) - {channel.id for channel in selected}
    for channel_id in sorted(missing):
        logging.warning("Channel %s not found on portal - skipping", channel_id)
    return selected


def fetch_guide(client: StalkerClient, channels: List[ChannelRecord]) -> List[InterchangeDocument]:
    """Fetch and convert the guide of every channel; failing channels are skipped"""
    documents = []
    failed = 0

    for index, channel in enumerate(channels, 1):
        logging.info(
            "Processing channel %d/%d: %s (%s)", index, len(channels), channel.name, channel.id
        )
        try:
            programs = client.get_epg(channel.id)
        except EPGFetchError as e:
            failed += 1
            logging.warning("  Guide unavailable for channel %s: %s", channel.id, e)
            continue

        document = client.to_interchange(channel.id, programs)
        documents.append(document)
        logging.info("  %d programmes", len(document.programmes))

    logging.info("Guide fetch complete: %d channels, %d failed", len(documents), failed)
    return documents


def download_logos(
    client: StalkerClient, channels: List[ChannelRecord], logo_dir: Path, template: str
) -> Dict[str, int]:
    """Download every channel logo, logging failures"""
    stats = {"downloaded": 0, "skipped": 0, "failed": 0}

    logging.info("Downloading channel logos to: %s", logo_dir)
    for channel in channels:
        if not channel.logo:
            stats["skipped"] += 1
            logging.debug("  No logo for channel %s", channel.id)
            continue
        try:
            client.download_channel_logo(channel, logo_dir, template)
            stats["downloaded"] += 1
        except (TransportError, OSError) as e:
            stats["failed"] += 1
            logging.warning("  Logo download failed for channel %s: %s", channel.id, e)

    logging.info(
        "Logos: %d downloaded, %d without logo, %d failed",
        stats["downloaded"],
        stats["skipped"],
        stats["failed"],
    )
    return stats


def main(argv=None):
    """Main application entry point"""
    start_time = time.time()

    arg_parser = ArgumentParser()
    args = arg_parser.parse_args(argv)
    setup_logging(arg_parser.get_logging_config(args))

    logging.info("=" * 60)
    logging.info("stalker2epg session started - Version %s", __version__)

    try:
        config_manager = ConfigManager(args.config_file)
        config = config_manager.load_config(arg_parser.get_config_overrides(args))
        config_manager.log_config_summary()

        transport = PortalTransport(timeout=config_manager.get_timeout())
        with StalkerClient(
            config["portal"], config["mac"], config["timezone"], transport=transport
        ) as client:
            client.authenticate()
            if config["probe"]:
                client.probe()

            channels = select_channels(client.get_channels(), config_manager.get_channel_list())
            documents = fetch_guide(client, channels)
            client.xmltv.generate_xmltv(documents, args.output)

            logo_dir = config_manager.get_logo_dir()
            if logo_dir is not None:
                download_logos(client, channels, logo_dir, config["logoformat"])

            logging.debug("Transport statistics: %s", transport.get_stats())

    except ConfigError as e:
        logging.error("Configuration error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except StalkerError as e:
        logging.error("Grab failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logging.warning("Interrupted by user")
        return 130

    logging.info("stalker2epg completed in %.2fs", time.time() - start_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
