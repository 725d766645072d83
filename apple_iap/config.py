import collections
import collections.abc
import logging
import os
from types import MappingProxyType

from .exceptions import ImproperlyConfigured
from .settings import (
    CONFIG_PREFIX,
    PASSWORD_ENV_VAR,
    PASSWORD_SETTING,
    REQUEST_DEFAULTS_SETTING,
)

log = logging.getLogger(__name__)


REQUEST_DEFAULT_KEYS = frozenset(["headers", "timeout", "proxies", "verify", "cert"])


class AppleConfig(
    collections.namedtuple("AppleConfig", ["password", "request_defaults", "options"])
):
    """
    Apple settings resolved once at startup.

    ``options`` holds every ``APPLE_`` prefixed key that was configured,
    ``request_defaults`` the options handed to the HTTP transport.
    """

    __slots__ = ()

    @classmethod
    def from_settings(cls, environ=None):
        from django.conf import settings

        return read_config(getattr(settings, "IAP_SETTINGS", None), environ=environ)

    @property
    def is_configured(self):
        return bool(self.options)

    def resolve_password(self, secret=None):
        # A secret given for a single call wins over the configured one
        if secret:
            return secret
        return self.password or None


EMPTY_CONFIG = AppleConfig(
    password=None, request_defaults=MappingProxyType({}), options=MappingProxyType({})
)


def _clean_request_defaults(value):
    if value is None:
        return {}

    if not isinstance(value, collections.abc.Mapping):
        raise ImproperlyConfigured(
            "{} must be a mapping, got {!r}".format(REQUEST_DEFAULTS_SETTING, value)
        )

    unknown = set(value) - REQUEST_DEFAULT_KEYS
    if unknown:
        raise ImproperlyConfigured(
            "Unsupported {} keys: {}".format(
                REQUEST_DEFAULTS_SETTING, ", ".join(sorted(unknown))
            )
        )

    return dict(value)


def read_config(config_in, environ=None):
    """
    Build an AppleConfig from a settings mapping such as IAP_SETTINGS.

    Having no Apple keys at all is valid. The password falls back to the
    APPLE_IAP_PASSWORD environment variable when none is configured.
    """
    if environ is None:
        environ = os.environ

    config_in = config_in or {}

    options = {
        key: value
        for key, value in config_in.items()
        if key.startswith(CONFIG_PREFIX)
    }
    request_defaults = _clean_request_defaults(config_in.get(REQUEST_DEFAULTS_SETTING))

    password = options.get(PASSWORD_SETTING)
    if not password and environ.get(PASSWORD_ENV_VAR):
        log.info("Using the Apple password from {}".format(PASSWORD_ENV_VAR))
        password = environ[PASSWORD_ENV_VAR]

    if not options and not password:
        log.info("No Apple settings were found")

    return AppleConfig(
        password=password or None,
        request_defaults=MappingProxyType(request_defaults),
        options=MappingProxyType(options),
    )
