"""
Credentials and thread-safe credential storage

Credentials are immutable values that are either permanent (access key and
secret key) or temporary (additionally carrying a security token issued by
the token service). The active credentials of a client live in a
CredentialStore and are always replaced as a whole.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)


class CredentialKind(str, Enum):
    """Kinds of credentials accepted by the service"""
    PERMANENT = "permanent"
    TEMPORARY = "temporary"


@dataclass(frozen=True)
class Credentials:
    """
    Access credentials used to sign requests.

    Use the ``permanent`` and ``temporary`` constructors rather than
    building instances directly.

    Attributes:
        kind: Whether the credentials are permanent or temporary
        access_key: Access key ID
        secret_key: Secret access key
        security_token: Security token (temporary credentials only)
    """
    kind: CredentialKind
    access_key: str
    secret_key: str
    security_token: Optional[str] = None

    def __post_init__(self):
        if not self.access_key:
            raise InvalidConfigurationError("Access key cannot be empty")
        if not self.secret_key:
            raise InvalidConfigurationError("Secret key cannot be empty")
        if self.kind == CredentialKind.TEMPORARY and not self.security_token:
            raise InvalidConfigurationError("Temporary credentials require a security token")
        if self.kind == CredentialKind.PERMANENT and self.security_token is not None:
            raise InvalidConfigurationError("Permanent credentials cannot carry a security token")

    @classmethod
    def permanent(cls, access_key: str, secret_key: str) -> 'Credentials':
        """Create permanent AK/SK credentials"""
        return cls(CredentialKind.PERMANENT, access_key, secret_key)

    @classmethod
    def temporary(cls, access_key: str, secret_key: str, security_token: str) -> 'Credentials':
        """Create temporary credentials with a security token"""
        return cls(CredentialKind.TEMPORARY, access_key, secret_key, security_token)

    @property
    def is_temporary(self) -> bool:
        return self.kind == CredentialKind.TEMPORARY

    def resolve(self) -> Tuple[str, str, Optional[str]]:
        """
        Get the signing material.

        Returns:
            Tuple of (access_key, secret_key, security_token); the token is
            None for permanent credentials
        """
        if self.kind == CredentialKind.TEMPORARY:
            return self.access_key, self.secret_key, self.security_token
        return self.access_key, self.secret_key, None

    def __repr__(self) -> str:
        return f"Credentials(kind={self.kind.value!r}, access_key={self.access_key!r})"


class CredentialStore:
    """
    Thread-safe holder of the active credentials.

    ``get`` and ``replace`` are serialized by a single lock and never
    perform I/O while holding it, so both may be called from threads and
    from coroutines alike.
    """

    def __init__(self, credentials: Credentials):
        self._check(credentials)
        self._credentials = credentials
        self._lock = threading.Lock()

    @staticmethod
    def _check(credentials: Credentials) -> None:
        if not isinstance(credentials, Credentials):
            raise InvalidConfigurationError("credentials must be a Credentials instance")

    def get(self) -> Credentials:
        """Get a snapshot of the active credentials"""
        with self._lock:
            return self._credentials

    def replace(self, credentials: Credentials) -> None:
        """
        Replace the active credentials.

        Signatures computed before this call returns are unaffected.

        Args:
            credentials: New credentials

        Raises:
            InvalidConfigurationError: If credentials is not a Credentials instance
        """
        self._check(credentials)
        with self._lock:
            self._credentials = credentials
        logger.debug(f"Credentials replaced ({credentials.kind.value})")
