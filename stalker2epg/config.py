"""
stalker2epg.config - Configuration management

Handles the XML configuration file: default file creation, parsing, type
conversion, command line overrides and validation.
"""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigError


class ConfigManager:
    """Manages the stalker2epg configuration file"""

    DEFAULT_CONFIG = """<?xml version="1.0" encoding="utf-8"?>
<settings version="1">
  <!-- Portal identity -->
  <setting id="portal"></setting>
  <setting id="mac"></setting>
  <setting id="timezone">UTC</setting>

  <!-- Channel selection (comma separated ids, empty = all) -->
  <setting id="channels"></setting>

  <!-- Channel logos -->
  <setting id="logos">false</setting>
  <setting id="logodir"></setting>
  <setting id="logoformat">{id}.png</setting>

  <!-- Portal behaviour -->
  <setting id="probe">true</setting>
  <setting id="timeout">10</setting>
</settings>"""

    # Valid settings and their types
    VALID_SETTINGS = {
        "portal": str,
        "mac": str,
        "timezone": str,
        "channels": str,
        "logos": bool,
        "logodir": str,
        "logoformat": str,
        "probe": bool,
        "timeout": str,
    }

    DEFAULTS = {
        "portal": "",
        "mac": "",
        "timezone": "UTC",
        "channels": "",
        "logos": False,
        "logodir": "",
        "logoformat": "{id}.png",
        "probe": True,
        "timeout": "10",
    }

    MAC_PATTERN = re.compile(r"^[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}$")

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else None
        self.settings: Dict[str, Any] = dict(self.DEFAULTS)
        self.version: str = "1"
        self.config_changes: Dict[str, str] = {}

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Load the configuration file, apply command line overrides and validate"""
        if self.config_file is not None:
            if not self.config_file.exists():
                self._create_default_config()
            self._parse_config_file()

        for setting_id, value in (overrides or {}).items():
            if value is None:
                continue
            if setting_id not in self.VALID_SETTINGS:
                raise ConfigError(f"unknown setting: {setting_id}", operation="config")
            previous = self.settings.get(setting_id)
            self._process_settings({setting_id: value})
            if previous != self.settings[setting_id]:
                self.config_changes[setting_id] = f"{previous} → {self.settings[setting_id]}"

        self._validate_config()
        return self.settings

    def _create_default_config(self):
        """Create default configuration file"""
        logging.info("Creating default configuration: %s", self.config_file)
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            f.write(self.DEFAULT_CONFIG)

    def _parse_config_file(self):
        """Parse XML configuration file"""
        try:
            root = ET.parse(self.config_file).getroot()
        except (ET.ParseError, OSError) as e:
            logging.error("Cannot parse configuration file %s: %s", self.config_file, e)
            raise ConfigError(
                f"cannot read {self.config_file}", operation="config", cause=e
            ) from e

        logging.info("Reading configuration from: %s", self.config_file)
        self.version = root.attrib.get("version", "1")

        valid_settings = {}
        for setting in root.findall("setting"):
            setting_id = setting.get("id")
            setting_value = setting.get("value")
            if setting_value is None:
                setting_value = setting.text

            logging.debug("Config setting: %s = %s", setting_id, setting_value)

            if setting_id in self.VALID_SETTINGS:
                valid_settings[setting_id] = setting_value
            else:
                logging.warning(
                    "Unknown configuration setting ignored: %s = %s", setting_id, setting_value
                )

        self._process_settings(valid_settings)

    def _process_settings(self, settings_dict: Dict[str, Any]):
        """Process and type-convert settings"""
        for setting_id, setting_value in settings_dict.items():
            expected_type = self.VALID_SETTINGS[setting_id]

            if expected_type == bool:
                self.settings[setting_id] = self._parse_boolean(setting_value)
            else:
                self.settings[setting_id] = (
                    str(setting_value).strip() if setting_value is not None else ""
                )

    def _parse_boolean(self, value: Any) -> bool:
        """Parse boolean values from configuration"""
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return bool(value)

    def _validate_config(self):
        """Validate required settings"""
        portal = self.settings.get("portal", "")
        if not portal:
            raise ConfigError("missing required portal URL", operation="config")
        if not portal.lower().startswith(("http://", "https://")):
            raise ConfigError(f"portal URL must be HTTP/HTTPS: {portal}", operation="config")

        mac = self.settings.get("mac", "")
        if not mac:
            raise ConfigError("missing required MAC address", operation="config")
        if not self.MAC_PATTERN.match(mac):
            raise ConfigError(f"invalid MAC address: {mac}", operation="config")

        if not self.settings.get("timezone"):
            self.settings["timezone"] = "UTC"

        try:
            timeout = float(self.settings.get("timeout") or 0)
        except ValueError as e:
            raise ConfigError(
                f"invalid timeout: {self.settings.get('timeout')}", operation="config", cause=e
            ) from e
        if timeout <= 0:
            raise ConfigError("timeout must be > 0", operation="config")

        if self.settings.get("logos") and not self.settings.get("logodir"):
            raise ConfigError("logos enabled but no logodir configured", operation="config")

    def get_channel_list(self) -> Optional[List[str]]:
        """Explicit channel ids, or None for all channels"""
        channels = self.settings.get("channels", "")
        if not channels:
            return None
        return [channel.strip() for channel in channels.split(",") if channel.strip()]

    def get_timeout(self) -> float:
        return float(self.settings.get("timeout", "10"))

    def get_logo_dir(self) -> Optional[Path]:
        if not self.settings.get("logos"):
            return None
        return Path(self.settings["logodir"]).expanduser()

    def log_config_summary(self):
        """Log configuration summary"""
        logging.info("Configuration values processed:")
        for setting_id in self.VALID_SETTINGS:
            if setting_id in self.config_changes:
                logging.info("  %s: %s (command line)", setting_id, self.config_changes[setting_id])
            else:
                logging.info("  %s: %s", setting_id, self.settings.get(setting_id))
