"""Errors raised while storing profiles and resolving credentials."""


class AwsAssumeRoleError(Exception):
    """Base class for all aws_assume_role errors."""


class ProfileNotFoundError(AwsAssumeRoleError, KeyError):
    """A profile was required to exist in the config file but does not."""

    def __init__(self, profile_name):
        self.profile_name = profile_name
        super().__init__(f'Profile "{profile_name}" not found')

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]


class NoSourceProfileError(AwsAssumeRoleError):
    """A role profile has no usable source of credentials."""


class CyclicProfileError(NoSourceProfileError):
    """The source_profile chain loops back on itself."""

    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__('source_profile cycle detected: ' + ' -> '.join(self.chain))


class ConfigDisabledError(AwsAssumeRoleError):
    """The config file was opted out of and cannot be modified."""


class InvalidProfileError(AwsAssumeRoleError):
    """A profile field holds a value that cannot be used."""
