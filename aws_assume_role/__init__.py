"""aws-assume-role - AWS profiles with role chaining, MFA and keyring-held keys."""

__version__ = "1.0.0"
__author__ = "AgentGino"
__email__ = "himakar@qwik.tools"

from .credentials import Credentials
from .exceptions import (
    AwsAssumeRoleError,
    ConfigDisabledError,
    CyclicProfileError,
    InvalidProfileError,
    NoSourceProfileError,
    ProfileNotFoundError,
)
from .store import ProfileStore, determine_profile, open_store

__all__ = [
    "Credentials",
    "ProfileStore",
    "open_store",
    "determine_profile",
    "AwsAssumeRoleError",
    "ConfigDisabledError",
    "CyclicProfileError",
    "InvalidProfileError",
    "NoSourceProfileError",
    "ProfileNotFoundError",
]
