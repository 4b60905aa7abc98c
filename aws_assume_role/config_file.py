"""AWS config file location and section access."""

import configparser
import io
import os
from pathlib import Path

DEFAULT_SECTION = 'default'
PROFILE_PREFIX = 'profile '


def determine_config_path():
    """Get the AWS config file path, honouring AWS_CONFIG_FILE."""
    override = os.environ.get('AWS_CONFIG_FILE')
    if override:
        return Path(override).expanduser()
    return Path.home() / '.aws' / 'config'


def determine_credentials_path():
    """Get the shared credentials file path, honouring AWS_SHARED_CREDENTIALS_FILE."""
    override = os.environ.get('AWS_SHARED_CREDENTIALS_FILE')
    if override:
        return Path(override).expanduser()
    return Path.home() / '.aws' / 'credentials'


def is_default_profile(profile_name):
    return profile_name in (None, '', DEFAULT_SECTION)


def section_name(profile_name):
    """Map a profile name to its section in the config file."""
    if is_default_profile(profile_name):
        return DEFAULT_SECTION
    return f'{PROFILE_PREFIX}{profile_name}'


def profile_name_from_section(section):
    if section.startswith(PROFILE_PREFIX):
        return section[len(PROFILE_PREFIX):]
    return section


class ConfigFile:
    """Ordered INI sections loaded from one file.

    Sections are exposed as plain dicts so callers never hold a live
    ``configparser`` proxy. A published instance is never modified: writers
    change a ``copy()`` and swap it in, so readers see either the old or the
    new sections.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._parser = configparser.ConfigParser(interpolation=None)
        # Keep keys exactly as written
        self._parser.optionxform = str

    @classmethod
    def load(cls, path):
        config = cls(path)
        if config.path.exists():
            config._parser.read(config.path)
        return config

    def copy(self):
        clone = ConfigFile(self.path)
        clone._parser.read_string(self.dumps())
        return clone

    def sections(self):
        return self._parser.sections()

    def has_section(self, section):
        return self._parser.has_section(section)

    def get_section(self, section):
        if not self._parser.has_section(section):
            return None
        return dict(self._parser.items(section, raw=True))

    def set_section(self, section, values):
        """Replace a section with the given values."""
        if self._parser.has_section(section):
            self._parser.remove_section(section)
        self._parser.add_section(section)
        for key, value in values.items():
            self._parser.set(section, key, str(value))

    def delete_section(self, section):
        return self._parser.remove_section(section)

    def dumps(self):
        buffer = io.StringIO()
        self._parser.write(buffer)
        return buffer.getvalue()
