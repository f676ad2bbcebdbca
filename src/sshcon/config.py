"""Settings storage for sshcon."""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from sshcon.errors import ConfigFileNotFound, NotAFile

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "config.json"


def default_config_dir() -> Path:
    return Path.home() / ".config" / "sshcon"


def default_ssh_config() -> Path:
    return Path.home() / ".ssh" / "config"


@dataclass
class Settings:
    """Application settings, built once per invocation."""

    ssh_config: Path = field(default_factory=default_ssh_config)
    ssh_command: str = "ssh"
    scp_command: str = "scp"


def load_settings(config_dir: Path | None = None) -> Settings:
    """Load settings from disk.

    Args:
        config_dir: Directory holding ``config.json``. Defaults to
            ~/.config/sshcon.

    Returns:
        Settings with loaded values, or defaults if no settings file exists.
    """
    if config_dir is None:
        config_dir = default_config_dir()
    settings_file = config_dir / SETTINGS_FILE_NAME

    if not settings_file.exists():
        return Settings()

    try:
        with open(settings_file, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_file, e)
        return Settings()

    settings = Settings()
    if data.get("ssh_config"):
        settings.ssh_config = Path(data["ssh_config"]).expanduser()
    if data.get("ssh_command"):
        settings.ssh_command = data["ssh_command"]
    if data.get("scp_command"):
        settings.scp_command = data["scp_command"]
    return settings


def save_settings(settings: Settings, config_dir: Path | None = None) -> None:
    """Save settings to disk.

    Args:
        settings: Settings to save.
        config_dir: Directory holding ``config.json``. Defaults to
            ~/.config/sshcon.
    """
    if config_dir is None:
        config_dir = default_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    data = asdict(settings)
    data["ssh_config"] = str(settings.ssh_config)

    with open(config_dir / SETTINGS_FILE_NAME, "w") as f:
        json.dump(data, f, indent=2)


def resolve_ssh_config(settings: Settings, override: Path | None = None) -> Path:
    """Pick the SSH config file for this invocation and check it is usable.

    Raises:
        ConfigFileNotFound: If the file does not exist.
        NotAFile: If the path exists but is not a regular file.
    """
    path = (override or settings.ssh_config).expanduser()
    if not path.exists():
        raise ConfigFileNotFound(path)
    if not path.is_file():
        raise NotAFile(path)
    return path.resolve()
