"""
Argyle configuration files: key=value settings for scripts, with optional groups.

    # ~/.mytool
    source=/data/in
    targets=out1:~/out2
    # password written with Value(...).encrypted
    password=Vx2+...

    [remote]
    host=example.org

    configuration = load(passwords_key="s3cret", required=["source"])
    configuration.source.full_path          # '/data/in'
    configuration.targets.full_paths        # ['/home/me/out1', '/home/me/out2']
    configuration.password.decrypted        # plaintext
    configuration.remote.host               # 'example.org'
    configuration["remote"]["host"]         # same

Format
- "key=value" lines, "[group]" headers, "#" and ";" comment lines;
- keys are case sensitive, surrounding quotes around values are stripped;
- the default file is ~/.<script name without .py>, created empty when missing.

Encryption keeps passwords out of plain sight; it is not meant to resist attacks.
"""
import base64
import binascii
import logging
import os
import os.path
import sys
from configparser import ConfigParser
from configparser import Error as ParserError
from pathlib import Path

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .faults import ConfigurationError
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

# AES-192: the passwords key is padded with "*" up to this size
KEY_SIZE = 24
KEY_PADDING = b"*"
NONCE_SIZE = 12
TAG_SIZE = 16

_ROOT = "\x00root"


class Value(str):
    """
    A configuration value: a plain string with path and encryption helpers.
    """

    def __new__(cls, string, encryption_key=None):
        self = super().__new__(cls, string)
        if encryption_key is None:
            self._encryption_key = None
        else:
            key = encryption_key.encode("utf-8") if isinstance(encryption_key, str) else bytes(encryption_key)
            if len(key) > KEY_SIZE:
                raise ConfigurationError("Encryption key too long (maximum %d bytes)" % KEY_SIZE)
            self._encryption_key = key + KEY_PADDING * (KEY_SIZE - len(key))
        return self

    @property
    def full_path(self):
        """
        Absolute paths stay as they are; relative ones are resolved against the home.
        """
        if self.startswith("/"):
            return str(self)
        return os.path.normpath(os.path.join(os.path.expanduser("~"), os.path.expanduser(self)))

    @property
    def full_paths(self):
        return [Value(path).full_path for path in self.split(":")]

    @property
    def encrypted(self):
        key = self._require_key()
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = AESGCM(key).encrypt(nonce, self.encode("utf-8"), None)
        return base64.b64encode(nonce + ciphertext).decode("ascii")

    @property
    def decrypted(self):
        key = self._require_key()
        try:
            blob = base64.b64decode(str(self), validate=True)
        except (binascii.Error, ValueError):
            raise ConfigurationError("Encrypted value is not valid base64") from None
        if len(blob) <= NONCE_SIZE + TAG_SIZE:
            raise ConfigurationError("Encrypted value is too short")
        try:
            plaintext = AESGCM(key).decrypt(blob[:NONCE_SIZE], blob[NONCE_SIZE:], None)
        except InvalidTag:
            raise ConfigurationError("Encrypted value cannot be decrypted with the given key") from None
        return plaintext.decode("utf-8")

    def _require_key(self):
        if self._encryption_key is None:
            raise ConfigurationError("Encryption key not provided!")
        return self._encryption_key


class Configuration:
    """
    Namespace of values and groups; unknown names raise ConfigurationError.
    """

    def __init__(self, entries=None):
        self.__dict__["_entries"] = dict(entries or {})

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name):
        try:
            return self.__dict__["_entries"][name]
        except KeyError:
            raise ConfigurationError('Key/group "%s" not found!' % name) from None

    def __setitem__(self, name, value):
        self.__dict__["_entries"][name] = value

    def __contains__(self, name):
        return name in self.__dict__["_entries"]

    def __iter__(self):
        return iter(self.__dict__["_entries"])

    def __len__(self):
        return len(self.__dict__["_entries"])

    def __repr__(self):
        return "Configuration(%s)" % ", ".join("%s=%r" % item for item in self.__dict__["_entries"].items())


def default_config_file():
    """
    ~/.<script name>, without a trailing ".py".
    """
    name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argyle"
    if name.endswith(".py"):
        name = name[:-3]
    return Path.home() / ("." + name)


def _unquote(value):
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _parse(text, path):
    parser = ConfigParser(
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        interpolation=None,
        default_section="\x00defaults",
        strict=False,
    )
    parser.optionxform = str
    try:
        parser.read_string("[%s]\n%s" % (_ROOT, text), source=str(path))
    except ParserError as exception:
        raise ConfigurationError("Invalid configuration file %s: %s" % (path, exception)) from None

    return {
        section: {key: _unquote(value.strip()) for key, value in parser.items(section, raw=True)}
        for section in parser.sections()
    }


def load(config_file=Unset, passwords_key=None, required=()):
    """
    Load a configuration file into a Configuration namespace.

    - config_file: path (default: ~/.<script name>); created empty when missing.
    - passwords_key: key used by Value.encrypted/decrypted (at most 24 bytes).
    - required: keys that must be present outside any group.
    """
    path = Path(coalesce(config_file, default_config_file())).expanduser()
    if not path.exists():
        logger.debug("creating empty configuration file %s", path)
        path.touch()

    logger.debug("loading configuration from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exception:
        raise ConfigurationError("Cannot read configuration file %s: %s" % (path, exception)) from None

    sections = _parse(text, path)
    root = sections.pop(_ROOT, {})

    if missing := [key for key in required if key not in root]:
        raise ConfigurationError("Missing required configuration key(s): %s" % ", ".join(missing))

    configuration = Configuration({key: Value(value, passwords_key) for key, value in root.items()})
    for group, values in sections.items():
        configuration[group] = Configuration({key: Value(value, passwords_key) for key, value in values.items()})
    return configuration


__all__ = (
    "Value",
    "Configuration",
    "default_config_file",
    "load",
)
