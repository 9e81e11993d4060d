"""Configuration handling for the viscacha gopher client."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
import yaml

from .core.commands import KeyBindings

DEFAULT_CONFIG_PATH = "~/.config/viscacha/config.yaml"
HOME_PAGE = "gopher://gopher.floodgap.com/"


@dataclass
class Config:
    """Configuration settings for the client.

    Attributes:
        home_page: URL loaded when none is given on the command line.
        download_directory: Where image and binary resources are saved.
        timeout_seconds: Socket timeout, None to wait forever.
        bindings: Key to command name overrides, e.g. {"n": "scroll-down"}.
        log_path: File that receives the full log.
    """

    home_page: str = HOME_PAGE
    download_directory: str = "~/Downloads"
    timeout_seconds: float | None = None
    bindings: dict[str, str] = field(default_factory=dict)
    log_path: str = "viscacha.log"

    def get_download_path(self) -> Path:
        """Get download directory as expanded Path object."""
        return Path(self.download_directory).expanduser()

    def key_bindings(self, logger: logging.Logger | None = None) -> KeyBindings:
        """Build the key bindings: defaults overlaid with the configured overrides."""
        return KeyBindings.from_overrides(self.bindings, logger=logger)


def load_config(path: str | Path) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Config object with loaded values.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    config_path = Path(path).expanduser()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    # Extract sections
    browser = data.get("browser") or {}
    bindings = data.get("bindings") or {}
    logging_section = data.get("logging") or {}

    return Config(
        home_page=browser.get("home_page", Config.home_page),
        download_directory=browser.get("download_directory", Config.download_directory),
        timeout_seconds=browser.get("timeout_seconds", Config.timeout_seconds),
        bindings={str(key): str(command) for key, command in bindings.items()},
        log_path=logging_section.get("path", Config.log_path),
    )


def load_default_config() -> Config:
    """Load the config from the default location, or defaults if there is none."""
    try:
        return load_config(DEFAULT_CONFIG_PATH)
    except FileNotFoundError:
        return Config()
