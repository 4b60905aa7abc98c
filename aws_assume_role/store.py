"""Profile store: the AWS config file plus a keyring for secrets."""

import logging
import os
import secrets
import threading
from pathlib import Path

from .config_file import (
    ConfigFile,
    determine_config_path,
    profile_name_from_section,
    section_name,
)
from .credentials import extract_credentials
from .exceptions import ConfigDisabledError, ProfileNotFoundError
from .keyring_store import KeyringStore
from .resolver import CredentialResolver

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    'region',
    'role_arn',
    'mfa_serial',
    'source_profile',
    'role_session_name',
    'external_id',
    'duration_seconds',
)


def determine_profile(options=None):
    """Pick the profile name: explicit option, then AWS_PROFILE, then 'default'."""
    options = options or {}
    return options.get('profile_name') or os.environ.get('AWS_PROFILE') or 'default'


class ProfileStore:
    """
    Profiles kept in the AWS config file with their keys kept in the keyring.

    The config file is loaded once, when the store is created, and the store
    keeps that handle for its whole life. Every write goes through one lock.
    Reads are not locked, so a reader may see a section a writer is about to
    replace.
    """

    def __init__(self, config_path=None, secret_store=None, profile_name=None,
                 config_enabled=True, resolver=None):
        self.config_path = Path(config_path) if config_path else determine_config_path()
        self.secret_store = secret_store or KeyringStore()
        self.profile_name = profile_name or determine_profile()
        self.config_enabled = config_enabled
        self._lock = threading.Lock()

        if config_enabled:
            self.configuration = ConfigFile.load(self.config_path)
        else:
            self.configuration = ConfigFile(self.config_path)

        self.resolver = resolver or CredentialResolver(self)

    def credentials(self, profile_name=None):
        """Resolve credentials for a profile.

        Args:
            profile_name: Profile to resolve; the store's default when omitted

        Returns:
            Credentials, or None when no source has any

        Raises:
            ProfileNotFoundError: an explicitly requested profile does not exist
        """
        if profile_name is not None:
            self._validate_profile_exists(profile_name)
        return self.resolver.resolve(profile_name or self.profile_name)

    def profile_exists(self, profile_name):
        return self.configuration.has_section(section_name(profile_name))

    def profile_config(self, profile_name):
        """Copy of a profile's section, or None when it does not exist."""
        logger.debug(f"About to lookup {profile_name}")
        return self.configuration.get_section(section_name(profile_name))

    def profiles(self):
        return [profile_name_from_section(s) for s in self.configuration.sections()]

    def save_profile(self, profile_name, fields):
        """
        Merge fields into a profile and move any keys into the keyring.

        Args:
            profile_name: Profile to create or update
            fields: Mapping of profile fields; may include access keys and the
                legacy ``serial_number`` name for ``mfa_serial``
        """
        self._check_enabled()
        key = section_name(profile_name)

        with self._lock:
            merged = self.configuration.get_section(key) or {}
            merged.update(fields or {})
            if merged.get('serial_number'):
                merged['mfa_serial'] = merged['serial_number']

            credentials = extract_credentials(merged)
            if credentials:
                self.secret_store.save(profile_name, credentials)

            values = {
                field: merged[field]
                for field in PROFILE_FIELDS
                if merged.get(field) not in (None, '')
            }
            updated = self.configuration.copy()
            updated.set_section(key, values)
            self.save_configuration(updated)
            self.configuration = updated

        logger.info(f"Saved profile {profile_name}")

    def delete_profile(self, profile_name):
        """Delete a profile and its keyring entry.

        The keyring entry is removed first and outside the lock, so it goes
        even when the profile itself is missing.
        """
        self.secret_store.delete(profile_name)
        self._check_enabled()
        key = section_name(profile_name)

        with self._lock:
            if not self.configuration.has_section(key):
                raise ProfileNotFoundError(profile_name)
            updated = self.configuration.copy()
            updated.delete_section(key)
            self.save_configuration(updated)
            self.configuration = updated

        logger.info(f"Deleted profile {profile_name}")

    def migrate_profile(self, profile_name):
        """Re-save a profile so any plaintext keys move into the keyring."""
        self._validate_profile_exists(profile_name)
        self.save_profile(profile_name, self.profile_config(profile_name))

    def migrate_all(self):
        migrated = []
        for profile_name in self.profiles():
            self.migrate_profile(profile_name)
            migrated.append(profile_name)
        return migrated

    def profile_region(self, profile_name):
        return self._resolve_field(profile_name, 'region')

    def profile_role(self, profile_name):
        return self._resolve_field(profile_name, 'role_arn')

    def save_configuration(self, configuration=None):
        """
        Write the config file. The caller must hold the lock.

        Writers pass the updated copy and only make it the store's
        configuration once this returns, so a failed write leaves the
        in-memory sections unchanged.

        The existing file is first overwritten with random bytes of the same
        length so the previous contents do not survive in the same blocks.
        """
        if configuration is None:
            configuration = self.configuration
        path = self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)

        size = path.stat().st_size if path.exists() else 0
        if size:
            with open(path, 'r+b') as f:
                f.write(secrets.token_bytes(size))
                f.flush()
                os.fsync(f.fileno())

        with open(path, 'w') as f:
            f.write(configuration.dumps())

        # Set restrictive permissions (read/write for owner only)
        path.chmod(0o600)

    def _resolve_field(self, profile_name, field):
        # One snapshot for both lookups
        configuration = self.configuration
        config = configuration.get_section(section_name(profile_name))
        if not config:
            return None
        if field in config:
            return config[field]
        source_profile = config.get('source_profile')
        if not source_profile:
            return None
        source_config = configuration.get_section(section_name(source_profile)) or {}
        return source_config.get(field)

    def _validate_profile_exists(self, profile_name):
        if not self.profile_exists(profile_name):
            raise ProfileNotFoundError(profile_name)

    def _check_enabled(self):
        if not self.config_enabled:
            raise ConfigDisabledError(
                'The AWS config file is disabled by AWS_SDK_CONFIG_OPT_OUT'
            )


def open_store(**kwargs):
    """Build a ProfileStore from the environment.

    Meant to be called once by the application, which then passes the store
    around.
    """
    kwargs.setdefault('config_enabled', not os.environ.get('AWS_SDK_CONFIG_OPT_OUT'))
    return ProfileStore(**kwargs)
