"""Credential cache in the OS keyring (Keychain, Secret Service, Credential Locker)."""

import logging

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .credentials import Credentials

logger = logging.getLogger(__name__)

SERVICE_NAME = 'aws-assume-role'


class KeyringStore:
    """Stores one JSON encoded credential pair per profile name."""

    def __init__(self, service_name=SERVICE_NAME):
        self.service_name = service_name

    def fetch(self, profile_name):
        """Return the cached credentials for a profile, or None."""
        logger.debug(f"Attempt to fetch {profile_name} from keyring")
        raw = keyring.get_password(self.service_name, profile_name)
        try:
            return Credentials.from_json(raw)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable keyring entry for {profile_name}: {e}")
            return None

    def save(self, profile_name, credentials):
        keyring.set_password(self.service_name, profile_name, credentials.to_json())
        logger.info(f"Stored credentials for {profile_name} in keyring")

    def delete(self, profile_name):
        """Remove a profile's entry. Keyring failures are logged, not raised."""
        try:
            keyring.delete_password(self.service_name, profile_name)
            logger.info(f"Deleted credentials for {profile_name} from keyring")
        except PasswordDeleteError:
            logger.debug(f"No keyring entry for {profile_name}")
        except KeyringError as e:
            logger.warning(f"Could not delete keyring entry for {profile_name}: {e}")
