"""Persistence of configured bridges.

Owner and project live in the ``bridges`` section of config.yaml; the
token is kept out of the file and stored in the OS keyring (macOS
Keychain, Windows Credential Manager, Secret Service on Linux).
"""

import logging

import keyring
import keyring.errors

from bug_bridge.config import load_config, save_config
from bug_bridge.github.configurator import validate_config
from bug_bridge.github.exceptions import TokenStorageError
from bug_bridge.github.models import KEY_OWNER, KEY_PROJECT, KEY_TOKEN, ConfigurationRecord

logger = logging.getLogger(__name__)

SERVICE_NAME = "bug-bridge"
BRIDGES_SECTION = "bridges"


def _token_key(name: str) -> str:
    return f"{name}:{KEY_TOKEN}"


class BridgeStore:
    """Saves and loads bridge configurations by name."""

    def save(self, name: str, record: ConfigurationRecord) -> None:
        """Store a configuration record under the given bridge name.

        The token goes to the keyring first so a failing backend leaves
        config.yaml untouched.

        Raises:
            TokenStorageError: If the keyring refused the token
        """
        try:
            keyring.set_password(SERVICE_NAME, _token_key(name), record.token)
        except keyring.errors.KeyringError as e:
            raise TokenStorageError(f"cannot store token for bridge {name}: {e}") from e

        config = load_config()
        bridges = config.get(BRIDGES_SECTION) or {}
        bridges[name] = {KEY_OWNER: record.owner, KEY_PROJECT: record.project}
        config[BRIDGES_SECTION] = bridges
        save_config(config)
        logger.debug(f"Bridge '{name}' stored")

    def get_raw(self, name: str) -> dict[str, str] | None:
        """Return the stored key/value form of a bridge, possibly incomplete."""
        entry = (load_config().get(BRIDGES_SECTION) or {}).get(name)
        if entry is None:
            return None

        conf = {k: str(v) for k, v in entry.items() if k in (KEY_OWNER, KEY_PROJECT)}
        token = keyring.get_password(SERVICE_NAME, _token_key(name))
        if token:
            conf[KEY_TOKEN] = token
        return conf

    def load(self, name: str) -> ConfigurationRecord | None:
        """Load a bridge configuration.

        Returns:
            The record, or None if no bridge with that name exists

        Raises:
            MissingConfigurationKeyError: If the stored entry is incomplete
        """
        conf = self.get_raw(name)
        if conf is None:
            return None
        validate_config(conf)
        return ConfigurationRecord.from_dict(conf)

    def remove(self, name: str) -> bool:
        """Delete a bridge configuration.

        Returns:
            True if anything was removed
        """
        removed = False
        config = load_config()
        bridges = config.get(BRIDGES_SECTION) or {}
        if name in bridges:
            del bridges[name]
            save_config(config)
            removed = True

        try:
            keyring.delete_password(SERVICE_NAME, _token_key(name))
            removed = True
        except keyring.errors.PasswordDeleteError:
            pass

        if removed:
            logger.debug(f"Bridge '{name}' removed")
        return removed

    def list_names(self) -> list[str]:
        """Names of all configured bridges."""
        return sorted(load_config().get(BRIDGES_SECTION) or {})
