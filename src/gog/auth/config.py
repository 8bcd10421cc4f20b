import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from gog.auth import CONFIG_APP_DIR, CONFIG_FILE_NAME

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass
class Config:
    keyring_backend: str = ""
    # Keys this package does not know about, kept so a write does not drop them
    extra: dict = field(default_factory=dict)


def config_dir() -> Path:
    """Return the gogcli config directory, honouring XDG_CONFIG_HOME."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / CONFIG_APP_DIR


def config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def read_config(path: Optional[PathLike] = None) -> Config:
    """Load config from JSON file. Returns empty Config if file doesn't exist."""
    expanded = Path(path).expanduser() if path else config_path()
    if not expanded.exists():
        return Config()

    data = json.loads(expanded.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Config file {expanded} must contain a JSON object")

    extra = dict(data)
    keyring_backend = extra.pop("keyring_backend", "") or ""
    return Config(keyring_backend=str(keyring_backend), extra=extra)


def write_config(config: Config, path: Optional[PathLike] = None) -> None:
    """Persist config as JSON.

    The file is written to a temporary sibling and renamed into place, so readers
    see either the old or the new content.
    """
    target = Path(path).expanduser() if path else config_path()
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    data = dict(config.extra)
    if config.keyring_backend:
        data["keyring_backend"] = config.keyring_backend

    fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".json", dir=target.parent)
    try:
        with os.fdopen(fd, "w") as f:
            f.write(json.dumps(data, indent=2) + "\n")
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    log.debug("Wrote config to %s", target)
