"""
Symmetric encryption service used for encrypted attributes.

The attribute layer treats this as an opaque collaborator: it only relies on
encrypt(str) -> str and decrypt(str) -> str, with DecryptionError raised for
ciphertext that cannot be decrypted.
"""

import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from encrypted_attributes.config import settings

logger = logging.getLogger(__name__)


class DecryptionError(Exception):
    """Ciphertext was malformed or encrypted under a different key."""


class EncryptionService:
    """Wraps Fernet symmetric encryption for attribute values."""

    def __init__(self, key: str | bytes | None = None):
        raw_key = key or settings.ENCRYPTION_KEY
        if raw_key:
            self._fernet = Fernet(raw_key.encode() if isinstance(raw_key, str) else raw_key)
        else:
            # Development only; production keys come from ENCRYPTION_KEY.
            logger.warning("ENCRYPTION_KEY is not set, generating an ephemeral key")
            self._fernet = Fernet(Fernet.generate_key())

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string and return base64-encoded ciphertext."""
        if not plaintext:
            return ""
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt base64-encoded ciphertext back to plaintext."""
        if not ciphertext:
            return ""
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken as exc:
            raise DecryptionError("ciphertext could not be decrypted") from exc


@lru_cache(maxsize=None)
def get_encryption_service() -> EncryptionService:
    """Process-wide service built from settings."""
    return EncryptionService()
