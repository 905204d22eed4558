import pytest

from stalker2epg.config import ConfigManager
from stalker2epg.errors import ConfigError

from .conftest import MAC, PORTAL

CONFIG = """<?xml version="1.0" encoding="utf-8"?>
<settings version="1">
  <setting id="portal">{portal}</setting>
  <setting id="mac">{mac}</setting>
  <setting id="timezone">Europe/Paris</setting>
  <setting id="channels">1, 2 ,,3</setting>
  <setting id="probe">false</setting>
  <setting id="legacy">whatever</setting>
</settings>"""


def write_config(tmp_path, portal=PORTAL, mac=MAC):
    config_file = tmp_path / "stalker2epg.xml"
    config_file.write_text(CONFIG.format(portal=portal, mac=mac), encoding="utf-8")
    return config_file


def test_load_config_file(tmp_path):
    manager = ConfigManager(write_config(tmp_path))
    settings = manager.load_config()

    assert settings["portal"] == PORTAL
    assert settings["mac"] == MAC
    assert settings["timezone"] == "Europe/Paris"
    assert settings["probe"] is False
    assert settings["logoformat"] == "{id}.png"
    assert "legacy" not in settings
    assert manager.get_channel_list() == ["1", "2", "3"]
    assert manager.get_timeout() == 10.0
    assert manager.get_logo_dir() is None


def test_command_line_overrides(tmp_path):
    manager = ConfigManager(write_config(tmp_path))
    settings = manager.load_config(
        {"timezone": "UTC", "logos": True, "logodir": str(tmp_path), "mac": None}
    )

    assert settings["timezone"] == "UTC"
    assert settings["mac"] == MAC
    assert manager.get_logo_dir() == tmp_path
    assert "timezone" in manager.config_changes


def test_missing_file_creates_default_and_requires_portal(tmp_path):
    config_file = tmp_path / "conf" / "stalker2epg.xml"

    with pytest.raises(ConfigError):
        ConfigManager(config_file).load_config()

    assert config_file.exists()
    settings = ConfigManager(config_file).load_config({"portal": PORTAL, "mac": MAC})
    assert settings["timezone"] == "UTC"
    assert settings["probe"] is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"mac": MAC},
        {"portal": PORTAL},
        {"portal": "ftp://portal", "mac": MAC},
        {"portal": PORTAL, "mac": "not-a-mac"},
        {"portal": PORTAL, "mac": MAC, "timeout": "0"},
        {"portal": PORTAL, "mac": MAC, "timeout": "soon"},
        {"portal": PORTAL, "mac": MAC, "logos": True},
        {"portal": PORTAL, "mac": MAC, "color": "blue"},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ConfigError):
        ConfigManager().load_config(overrides)


def test_unparseable_file(tmp_path):
    config_file = tmp_path / "broken.xml"
    config_file.write_text("<settings>", encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigManager(config_file).load_config()
