"""
Registration flag store
The flag is read fresh on every call, never cached
"""
import json
import logging
from pathlib import Path
from typing import Union

from keygate.core.errors import ConfigError
from keygate.models import RegistrationConfig

logger = logging.getLogger(__name__)


class ConfigProvider:
    """Source of the registration flag"""

    def load(self) -> RegistrationConfig:
        raise NotImplementedError


class StaticConfigProvider(ConfigProvider):
    """In-memory flag, for tests and local runs"""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def load(self) -> RegistrationConfig:
        return RegistrationConfig(registration_enabled=self.enabled)


class FileConfigProvider(ConfigProvider):
    """
    Flag stored as {"registrationEnabled": bool} in a JSON file.

    A missing file is created with registration disabled. A corrupt file is
    logged and treated as disabled, and left on disk for inspection.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> RegistrationConfig:
        if not self.path.exists():
            default = RegistrationConfig()
            logger.info(f"No registration config at {self.path}, creating default")
            try:
                self.save(default)
            except OSError as e:
                logger.error(f"Could not write default config to {self.path}: {e}")
            return default

        try:
            return self._read()
        except ConfigError as e:
            logger.error(f"Error loading config: {e}")
            return RegistrationConfig()

    def _read(self) -> RegistrationConfig:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(self.path, f"unreadable ({e})") from e
        except json.JSONDecodeError as e:
            raise ConfigError(self.path, f"invalid JSON ({e.msg})") from e

        if not isinstance(raw, dict):
            raise ConfigError(self.path, "expected a JSON object")
        enabled = raw.get("registrationEnabled", False)
        if not isinstance(enabled, bool):
            raise ConfigError(self.path, "registrationEnabled must be a boolean")
        return RegistrationConfig(registration_enabled=enabled)

    def save(self, config: RegistrationConfig):
        """Write the flag file. The running service never calls this."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(config.to_file(), indent=2) + "\n", encoding="utf-8")
