"""
stalker2epg.args - Command line argument parsing
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict


class ArgumentParser:
    """Command line argument parser for stalker2epg"""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the argument parser"""
        parser = argparse.ArgumentParser(
            prog="stalker2epg",
            description="XMLTV grabber for Stalker middleware portals",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  stalker2epg --portal http://portal.example.com --mac 00:1A:79:00:00:01
  stalker2epg --config-file ~/stalker2epg.xml --output guide.xml --console
  stalker2epg --portal http://portal.example.com --mac 00:1A:79:00:00:01 \\
              --timezone America/New_York --channels 101,102 --logos ./logos
  stalker2epg --config-file ~/stalker2epg.xml --logos ./logos --logo-format "{name}.png"

Logo filename placeholders:
  {id}            Channel id
  {name}          Channel name

Logging Levels:
  (default)       Info, warnings and errors
  --warning       Only warnings and errors
  --debug         All debug information
  --console       Display log to stderr (can combine with --warning/--debug)
  --quiet         No console output except XML
""",
        )

        parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

        # Log level selection
        level_group = parser.add_mutually_exclusive_group()
        level_group.add_argument(
            "--warning", "-w", action="store_true", help="Only warnings and errors"
        )
        level_group.add_argument("--debug", action="store_true", help="All debug information")

        # Console output control
        console_group = parser.add_mutually_exclusive_group()
        console_group.add_argument(
            "--console", action="store_true", help="Display active log level to stderr"
        )
        console_group.add_argument(
            "--quiet", "-q", action="store_true", help="No console output except XML"
        )

        parser.add_argument("--log-file", type=Path, help="Also write the log to this file")

        # Output control
        parser.add_argument(
            "--output", "-o", type=Path, help="Write XMLTV to file instead of stdout"
        )

        # Configuration
        parser.add_argument("--config-file", type=Path, help="Configuration file path")

        # Portal identity (override configuration)
        parser.add_argument("--portal", type=str, help="Portal base URL (http://host[:port])")
        parser.add_argument("--mac", type=str, help="Device MAC address (00:1A:79:XX:XX:XX)")
        parser.add_argument("--timezone", type=str, help="IANA timezone, e.g. Europe/London")
        parser.add_argument(
            "--channels", type=str, help="Comma separated channel ids (default: all)"
        )
        parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")

        # Logos
        parser.add_argument(
            "--logos", type=Path, metavar="DIR", help="Download channel logos to DIR"
        )
        parser.add_argument(
            "--logo-format", type=str, help="Logo filename template (default: {id}.png)"
        )

        parser.add_argument(
            "--no-probe", action="store_true", help="Skip server capability probing"
        )

        return parser

    def parse_args(self, args=None):
        """Parse command line arguments"""
        args = self.parser.parse_args(args)

        if args.version:
            from . import __version__

            print(__version__)
            sys.exit(0)

        if args.timeout is not None and args.timeout <= 0:
            self.parser.error("--timeout must be > 0")

        return args

    def get_logging_config(self, args) -> Dict[str, Any]:
        """Determine logging configuration from arguments"""
        config = {
            "level": "default",
            "console": False,
            "quiet": False,
            "log_file": args.log_file,
        }

        if args.debug:
            config["level"] = "debug"
        elif args.warning:
            config["level"] = "warning"

        if args.console:
            config["console"] = True
        elif args.quiet:
            config["quiet"] = True

        return config

    def get_config_overrides(self, args) -> Dict[str, Any]:
        """Configuration settings given on the command line"""
        overrides = {
            "portal": args.portal,
            "mac": args.mac,
            "timezone": args.timezone,
            "channels": args.channels,
            "logoformat": args.logo_format,
            "timeout": str(args.timeout) if args.timeout is not None else None,
        }
        if args.logos is not None:
            overrides["logos"] = True
            overrides["logodir"] = str(args.logos)
        if args.no_probe:
            overrides["probe"] = False
        return overrides
