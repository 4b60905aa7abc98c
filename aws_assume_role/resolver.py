"""Credential resolution across keyring, static keys and role chains."""

import logging

from .config_file import ConfigFile, determine_credentials_path, is_default_profile, DEFAULT_SECTION
from .credentials import extract_credentials
from .exceptions import CyclicProfileError, InvalidProfileError, NoSourceProfileError
from .providers import AssumeRoleCredentials, MfaSessionCredentials

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = 'default_session'


class CredentialResolver:
    """
    Resolves credentials for a profile of a ``ProfileStore``.

    For every profile the sources are tried in order:

    1. the keyring entry, when the profile exists in the config file
    2. static keys in the profile's config section or the shared credentials file
    3. role assumption from ``source_profile``, with an MFA session first when
       ``mfa_serial`` is set

    The source_profile chain is walked with an explicit stack, so a chain of
    any length resolves its innermost profile first and then assumes each
    role on the way back out.
    """

    def __init__(self, store, assume_role_provider=AssumeRoleCredentials,
                 mfa_provider=MfaSessionCredentials, shared_credentials_path=None):
        self.store = store
        self.assume_role_provider = assume_role_provider
        self.mfa_provider = mfa_provider
        self.shared_credentials = ConfigFile.load(
            shared_credentials_path or determine_credentials_path()
        )

    def resolve(self, profile_name):
        """Return Credentials for ``profile_name`` or None when nothing applies.

        Raises:
            NoSourceProfileError: a role profile has no usable source
            CyclicProfileError: the source_profile chain loops
            InvalidProfileError: a profile field cannot be used
        """
        pending = []
        visited = []
        current = _normalize(profile_name)

        while True:
            if current in visited:
                raise CyclicProfileError(visited + [current])
            visited.append(current)

            credentials = self._from_keyring(current) or self._from_static(current)
            if credentials:
                break

            config = self.store.profile_config(current) or {}
            source_profile = config.get('source_profile')
            role_arn = config.get('role_arn')

            if source_profile:
                pending.append((current, config))
                current = _normalize(source_profile)
                continue

            if role_arn:
                raise NoSourceProfileError(
                    f"Profile {current} has a role_arn, but no source_profile."
                )
            if pending:
                raise _source_without_credentials(pending[-1][0])
            logger.debug(f"No credentials found for {current}")
            return None

        while pending:
            name, config = pending.pop()
            if not config.get('role_arn'):
                # A source_profile alone gives nothing to assume
                if pending:
                    raise _source_without_credentials(pending[-1][0])
                logger.debug(f"Profile {name} has a source_profile but no role_arn")
                return None
            credentials = self._assume_role(name, config, credentials)
        return credentials

    def _from_keyring(self, profile_name):
        if not self.store.profile_exists(profile_name):
            return None
        return self.store.secret_store.fetch(profile_name)

    def _from_static(self, profile_name):
        section = self.store.profile_config(profile_name)
        credentials = extract_credentials(section) if section else None
        if credentials:
            logger.debug(f"Using static keys from config for {profile_name}")
            return credentials

        shared = self.shared_credentials.get_section(profile_name)
        credentials = extract_credentials(shared) if shared else None
        if credentials:
            logger.debug(f"Using static keys from shared credentials for {profile_name}")
        return credentials

    def _assume_role(self, profile_name, config, source_credentials):
        source_profile = config['source_profile']
        region = self.store.profile_region(profile_name)
        options = {
            'role_arn': config['role_arn'],
            'role_session_name': config.get('role_session_name') or DEFAULT_SESSION_NAME,
            'external_id': config.get('external_id'),
            'region': region,
        }
        if config.get('duration_seconds'):
            try:
                options['duration_seconds'] = int(config['duration_seconds'])
            except ValueError:
                raise InvalidProfileError(
                    f"Profile {profile_name} has a non-numeric duration_seconds: "
                    f"{config['duration_seconds']!r}"
                ) from None

        credentials = source_credentials
        mfa_serial = config.get('mfa_serial')
        if mfa_serial:
            # MFA session feeds the role assumption and is never returned on its own
            credentials = self.mfa_provider(
                credentials=source_credentials,
                region=region,
                serial_number=mfa_serial,
                profile=profile_name,
                source_profile=source_profile,
            ).credentials

        logger.debug(f"Assuming role for {profile_name} from {source_profile}")
        return self.assume_role_provider(
            credentials=credentials,
            profile=source_profile,
            **options
        ).credentials


def _source_without_credentials(profile_name):
    return NoSourceProfileError(
        f"Profile {profile_name} has a source_profile, but the "
        "source_profile does not have credentials."
    )


def _normalize(profile_name):
    if is_default_profile(profile_name):
        return DEFAULT_SECTION
    return profile_name
