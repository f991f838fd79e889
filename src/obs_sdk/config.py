"""
Client configuration for the OBS Python SDK

Provides the OBSConfiguration data class and loading it from environment
variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urlsplit

from .credentials import Credentials
from .exceptions import InvalidConfigurationError
from .logging_config import LOG_LEVELS

ENV_ACCESS_KEY = "OBS_AK"
ENV_SECRET_KEY = "OBS_SK"
ENV_SECURITY_TOKEN = "OBS_SECURITY_TOKEN"
ENV_ENDPOINT = "OBS_ENDPOINT"
ENV_USE_SSL = "OBS_USE_SSL"
ENV_MAX_RETRY_COUNT = "OBS_MAX_RETRY_COUNT"
ENV_TIMEOUT = "OBS_TIMEOUT"
ENV_LOG_LEVEL = "OBS_LOG_LEVEL"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class OBSConfiguration:
    """
    Configuration for an OBSClient.

    Attributes:
        endpoint: Service endpoint host (e.g. obs.cn-north-4.myhuaweicloud.com);
            a scheme prefix, if given, sets use_ssl
        credentials: Initial credentials
        use_ssl: Use https rather than http
        max_retry_count: Retries after the first attempt for transient failures
        timeout: Transport timeout in seconds
        verify_ssl: Verify TLS certificates
        log_level: SDK log level (none, error, warning, info, debug)
    """
    endpoint: str
    credentials: Credentials
    use_ssl: bool = True
    max_retry_count: int = 3
    timeout: float = 30.0
    verify_ssl: bool = True
    log_level: str = "none"

    def __post_init__(self):
        """Validate configuration."""
        if not self.endpoint:
            raise InvalidConfigurationError("Endpoint cannot be empty")

        if "://" in self.endpoint:
            parsed = urlsplit(self.endpoint)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise InvalidConfigurationError(f"Invalid endpoint format: {self.endpoint}")
            self.use_ssl = parsed.scheme == "https"
            self.endpoint = parsed.netloc
        self.endpoint = self.endpoint.strip("/")

        if "/" in self.endpoint or not self.endpoint:
            raise InvalidConfigurationError(f"Invalid endpoint format: {self.endpoint}")

        if not isinstance(self.credentials, Credentials):
            raise InvalidConfigurationError("credentials must be a Credentials instance")

        if self.max_retry_count < 0:
            raise InvalidConfigurationError("Max retry count must be non-negative")

        if self.timeout <= 0:
            raise InvalidConfigurationError("Timeout must be positive")

        if self.log_level.lower() not in LOG_LEVELS:
            raise InvalidConfigurationError(f"Unknown log level: {self.log_level}")

    @property
    def scheme(self) -> str:
        return "https" if self.use_ssl else "http"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'OBSConfiguration':
        """
        Load configuration from environment variables.

        OBS_AK, OBS_SK and OBS_ENDPOINT are required; OBS_SECURITY_TOKEN
        selects temporary credentials.

        Raises:
            InvalidConfigurationError: If a variable is missing or malformed
        """
        env = os.environ if environ is None else environ

        missing = [name for name in (ENV_ACCESS_KEY, ENV_SECRET_KEY, ENV_ENDPOINT) if not env.get(name)]
        if missing:
            raise InvalidConfigurationError(f"Missing environment variables: {', '.join(missing)}")

        token = env.get(ENV_SECURITY_TOKEN)
        if token:
            credentials = Credentials.temporary(env[ENV_ACCESS_KEY], env[ENV_SECRET_KEY], token)
        else:
            credentials = Credentials.permanent(env[ENV_ACCESS_KEY], env[ENV_SECRET_KEY])

        kwargs = {}
        if env.get(ENV_USE_SSL):
            kwargs['use_ssl'] = _parse_bool(ENV_USE_SSL, env[ENV_USE_SSL])
        if env.get(ENV_MAX_RETRY_COUNT):
            kwargs['max_retry_count'] = _parse_number(ENV_MAX_RETRY_COUNT, env[ENV_MAX_RETRY_COUNT], int)
        if env.get(ENV_TIMEOUT):
            kwargs['timeout'] = _parse_number(ENV_TIMEOUT, env[ENV_TIMEOUT], float)
        if env.get(ENV_LOG_LEVEL):
            kwargs['log_level'] = env[ENV_LOG_LEVEL]

        return cls(endpoint=env[ENV_ENDPOINT], credentials=credentials, **kwargs)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise InvalidConfigurationError(f"{name} must be a boolean, got {value!r}")


def _parse_number(name: str, value: str, kind):
    try:
        return kind(value)
    except ValueError:
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
