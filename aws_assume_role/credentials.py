"""Credential value type and expiration formatting."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class Credentials:
    """A complete access key pair, optionally temporary.

    Instances are always complete. Use ``Credentials.build`` when the input may
    be partial; it returns None instead of raising.
    """

    access_key_id: str
    secret_access_key: str
    session_token: Optional[str] = None
    expiration: Optional[datetime] = None

    def __post_init__(self):
        if not self.access_key_id or not self.secret_access_key:
            raise ValueError('Credentials need both an access key id and a secret access key')

    @classmethod
    def build(cls, access_key_id, secret_access_key, session_token=None, expiration=None):
        if not access_key_id or not secret_access_key:
            return None
        return cls(access_key_id, secret_access_key, session_token or None, expiration)

    @classmethod
    def from_sts(cls, response_credentials):
        """Build from the ``Credentials`` member of an STS response."""
        return cls(
            response_credentials['AccessKeyId'],
            response_credentials['SecretAccessKey'],
            response_credentials.get('SessionToken'),
            response_credentials.get('Expiration'),
        )

    @classmethod
    def from_json(cls, raw):
        """Decode a keyring entry. Returns None for missing or partial data."""
        if not raw:
            return None
        data = json.loads(raw)
        expiration = data.get('expiration')
        if expiration:
            expiration = datetime.fromisoformat(expiration)
        return cls.build(
            data.get('access_key_id'),
            data.get('secret_access_key'),
            data.get('session_token'),
            expiration,
        )

    def to_json(self):
        data = {
            'access_key_id': self.access_key_id,
            'secret_access_key': self.secret_access_key,
        }
        if self.session_token:
            data['session_token'] = self.session_token
        if self.expiration:
            data['expiration'] = self.expiration.isoformat()
        return json.dumps(data)

    def to_env(self):
        """Environment variables understood by the AWS SDKs and CLI."""
        env = {
            'AWS_ACCESS_KEY_ID': self.access_key_id,
            'AWS_SECRET_ACCESS_KEY': self.secret_access_key,
        }
        if self.session_token:
            env['AWS_SESSION_TOKEN'] = self.session_token
        return env

    def __repr__(self):
        return f'Credentials(access_key_id={self.access_key_id!r}, secret_access_key=***)'


def format_expiration(credentials, now=None):
    """Describe how long credentials remain valid.

    Args:
        credentials: Credentials to describe
        now: Reference time, defaults to the current UTC time

    Returns:
        str: 'Permanent', 'Expired', 'Xh Ym' or 'Ym'
    """
    if credentials.expiration is None:
        return 'Permanent'

    now = now or datetime.now(timezone.utc)
    expiration = credentials.expiration
    if expiration.tzinfo is None:
        expiration = expiration.replace(tzinfo=timezone.utc)

    time_left = expiration - now
    if time_left.total_seconds() <= 0:
        return 'Expired'

    hours = int(time_left.total_seconds() // 3600)
    minutes = int((time_left.total_seconds() % 3600) // 60)

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


ACCESS_KEY_FIELDS = ('aws_access_key_id', 'access_key_id')
SECRET_KEY_FIELDS = ('aws_secret_access_key', 'secret_access_key')
SESSION_TOKEN_FIELDS = ('aws_session_token', 'session_token')


def _pop_first(values, keys):
    found = None
    for key in keys:
        value = values.pop(key, None)
        if value and found is None:
            found = value
    return found


def extract_credentials(values):
    """Remove every secret key field from ``values``.

    Both the ``aws_`` prefixed names used in AWS files and the bare names are
    accepted.

    Returns:
        Credentials or None when the pair is incomplete
    """
    return Credentials.build(
        _pop_first(values, ACCESS_KEY_FIELDS),
        _pop_first(values, SECRET_KEY_FIELDS),
        _pop_first(values, SESSION_TOKEN_FIELDS),
    )
