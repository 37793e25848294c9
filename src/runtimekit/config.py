from pathlib import Path
from typing import Dict, Optional

from .domain.models import RuntimeEndpoints

CONFIG_DIR = Path.home() / ".runtimekit"
CONFIG_FILE = CONFIG_DIR / "config"

VERSIONS_URL_KEY = "RUNTIMEKIT_VERSIONS_URL"
TARBALL_URL_KEY = "RUNTIMEKIT_TARBALL_URL"
SDK_URL_KEY = "RUNTIMEKIT_SDK_URL"

DEFAULT_SDK_URL = (
    "https://storage.googleapis.com/dart-archive/channels/stable/release/"
    "{version}/sdk/dartsdk-linux-x64-release.zip"
)

def _read_config(config_file: Path) -> Dict[str, str]:
    config = {}
    if not config_file.exists():
        return config
    try:
        with open(config_file, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line and not line.startswith("#"):
                    key, value = line.split("=", 1)
                    config[key.strip()] = value.strip()
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config

def get_config_value(key: str, config_file: Path = CONFIG_FILE) -> Optional[str]:
    """get a single value from the config file."""
    return _read_config(config_file).get(key) or None

def set_config_value(key: str, value: str, config_file: Path = CONFIG_FILE):
    """set a value in the config file, preserving other config values."""
    config_file.parent.mkdir(parents=True, exist_ok=True)

    config = _read_config(config_file)
    config[key] = value

    try:
        with open(config_file, "w") as f:
            for k, v in config.items():
                f.write(f"{k}={v}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e

def load_endpoints(config_file: Path = CONFIG_FILE) -> RuntimeEndpoints:
    """build endpoint templates from the config file.

    the catalog and tarball templates have no default; the sdk template falls
    back to the stable dart archive.
    """
    config = _read_config(config_file)
    return RuntimeEndpoints(
        versions_url=config.get(VERSIONS_URL_KEY) or None,
        tarball_url=config.get(TARBALL_URL_KEY) or None,
        sdk_url=config.get(SDK_URL_KEY) or DEFAULT_SDK_URL,
    )
