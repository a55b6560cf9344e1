# --- mdpage_lib/config.py ---
import configparser
import logging
import os

from .constants import (
    COLOR_HEX,
    DEFAULT_DPI,
    DEFAULT_FONT_FAMILY,
    DEFAULT_PADDING_PERCENT,
    DEFAULT_PAGE_FORMAT,
)

log = logging.getLogger("mdpage.config")

APP_DIR = os.path.join(os.path.expanduser("~"), ".mdpage")
DEFAULT_CONFIG_PATH = os.path.join(APP_DIR, "mdpage.cfg")


class ConfigService:
    """Manages reading from and writing to the mdpage.cfg file."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = config_path
        self.defaults = {
            "Page": {
                "dpi": str(DEFAULT_DPI),
                "page_format": DEFAULT_PAGE_FORMAT,
                "padding": str(DEFAULT_PADDING_PERCENT),
            },
            "Colors": {
                "highlight": COLOR_HEX["HIGHLIGHT"],
                "link": COLOR_HEX["LINK"],
                "page_background": COLOR_HEX["PAGE_BACKGROUND"],
            },
            "Fonts": {
                "family": DEFAULT_FONT_FAMILY,
                "font_dirs": "",
            },
        }

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        config = configparser.ConfigParser()
        # Apply defaults first
        for section, values in self.defaults.items():
            config[section] = values

        # Read existing file to override defaults
        try:
            found = config.read(self.config_path)
        except configparser.Error as e:
            log.warning("Ignoring unreadable config file %s: %s", self.config_path, e)
            config = configparser.ConfigParser()
            for section, values in self.defaults.items():
                config[section] = values
            found = True
        if not found:
            log.info("Config file not found at %s. Creating with defaults.", self.config_path)
            self.save_settings(self._config_to_dict(config))

        return self._config_to_dict(config)

    def save_settings(self, settings: dict):
        """Saves a dictionary of settings to the config file."""
        config = configparser.ConfigParser()
        for section, values in settings.items():
            config[section] = {k: str(v) for k, v in values.items()}

        try:
            config_dir = os.path.dirname(self.config_path)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(self.config_path, "w") as configfile:
                config.write(configfile)
            log.info("Settings successfully saved to %s", self.config_path)
        except IOError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        """Converts a ConfigParser object to a nested dictionary."""
        return {s: dict(config.items(s)) for s in config.sections()}


def font_dirs_from(settings: dict) -> list:
    """Splits the [Fonts] font_dirs value on commas or the path separator."""
    raw = settings.get("Fonts", {}).get("font_dirs", "") or ""
    parts = raw.replace(os.pathsep, ",").split(",")
    return [p.strip() for p in parts if p.strip()]


def number_setting(
    settings: dict, section: str, key: str, default: float, allow_zero: bool = False
) -> float:
    """A positive number from the settings, or `default` when absent or invalid.

    With allow_zero, 0 is accepted as well (padding may be switched off).
    """
    raw = settings.get(section, {}).get(key)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        if raw not in (None, ""):
            log.warning("Invalid value %r for [%s] %s, using %s.", raw, section, key, default)
        return default
    if value < 0 or (value == 0 and not allow_zero):
        log.warning("Out-of-range value %r for [%s] %s, using %s.", raw, section, key, default)
        return default
    return value
