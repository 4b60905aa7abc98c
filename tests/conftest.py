"""Shared pytest fixtures for aws_assume_role tests."""

import pytest
from pathlib import Path
import configparser
from unittest.mock import MagicMock

from aws_assume_role.credentials import Credentials
from aws_assume_role.resolver import CredentialResolver
from aws_assume_role.store import ProfileStore


class InMemorySecretStore:
    """Keyring stand-in keyed by profile name."""

    def __init__(self):
        self.entries = {}
        self.deleted = []

    def fetch(self, profile_name):
        return self.entries.get(profile_name)

    def save(self, profile_name, credentials):
        self.entries[profile_name] = credentials

    def delete(self, profile_name):
        self.deleted.append(profile_name)
        self.entries.pop(profile_name, None)


@pytest.fixture
def mock_aws_dir(tmp_path, monkeypatch):
    """Create a temporary AWS directory for testing."""
    aws_dir = tmp_path / '.aws'
    aws_dir.mkdir()

    # Mock Path.home() to return tmp_path
    monkeypatch.setattr(Path, 'home', lambda: tmp_path)
    for name in ('AWS_CONFIG_FILE', 'AWS_SHARED_CREDENTIALS_FILE', 'AWS_PROFILE',
                 'AWS_SDK_CONFIG_OPT_OUT'):
        monkeypatch.delenv(name, raising=False)

    return aws_dir


@pytest.fixture
def write_config(mock_aws_dir):
    """Write sections to ~/.aws/config and return its path."""
    def _write(sections, filename='config'):
        path = mock_aws_dir / filename
        config = configparser.ConfigParser()
        for section, values in sections.items():
            config[section] = values
        with open(path, 'w') as f:
            config.write(f)
        return path
    return _write


@pytest.fixture
def secret_store():
    return InMemorySecretStore()


@pytest.fixture
def role_credentials():
    return Credentials('ASIAROLEEXAMPLE', 'roleSecret', 'roleToken')


@pytest.fixture
def mfa_credentials():
    return Credentials('ASIAMFAEXAMPLE', 'mfaSecret', 'mfaToken')


@pytest.fixture
def assume_role_provider(role_credentials):
    provider = MagicMock(name='AssumeRoleCredentials')
    provider.return_value.credentials = role_credentials
    return provider


@pytest.fixture
def mfa_provider(mfa_credentials):
    provider = MagicMock(name='MfaSessionCredentials')
    provider.return_value.credentials = mfa_credentials
    return provider


@pytest.fixture
def make_store(mock_aws_dir, secret_store, assume_role_provider, mfa_provider):
    """Build a ProfileStore over ~/.aws/config with mocked providers."""
    def _make(**kwargs):
        kwargs.setdefault('config_path', mock_aws_dir / 'config')
        kwargs.setdefault('secret_store', secret_store)
        store = ProfileStore(**kwargs)
        store.resolver = CredentialResolver(
            store,
            assume_role_provider=assume_role_provider,
            mfa_provider=mfa_provider,
            shared_credentials_path=mock_aws_dir / 'credentials',
        )
        return store
    return _make
