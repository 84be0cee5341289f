"""
Attribute interceptor for encrypted fields.

A declared-encrypted field "token" is reachable under several names:

- token              -> the stored envelope, "<environment>.<ciphertext>"
- token_decrypted    -> the decrypted plaintext
- token_environment  -> the environment label, without decrypting
- token_raw (write)  -> stores the given value verbatim, skipping encryption

Suffixes are only honored when the stripped name is declared encrypted, so an
unrelated field such as "foo_decrypted" behaves like any other field.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Protocol

from encrypted_attributes.envelope import build_envelope, parse_envelope
from encrypted_attributes.exceptions import (
    DecryptionFailureError,
    EnvelopeError,
    MissingEnvironmentError,
)
from encrypted_attributes.services.encryption import DecryptionError

logger = logging.getLogger(__name__)

DECRYPTED_SUFFIX = "_decrypted"
ENVIRONMENT_SUFFIX = "_environment"
RAW_SUFFIX = "_raw"


class AccessMode(str, Enum):
    PLAIN = "plain"
    DECRYPTED = "decrypted"
    ENVIRONMENT = "environment"
    RAW_WRITE = "raw_write"


class Cipher(Protocol):
    def encrypt(self, plaintext: str) -> str: ...

    def decrypt(self, ciphertext: str) -> str: ...


def _strip_suffix(name: str, suffix: str, encrypted_fields: Iterable[str]) -> str | None:
    if name.endswith(suffix):
        base = name[: -len(suffix)]
        if base in encrypted_fields:
            return base
    return None


def classify_field_name(
    name: str, encrypted_fields: Iterable[str], *, writing: bool = False
) -> tuple[str, AccessMode]:
    """Resolve an attribute name to its base field and access mode."""
    if writing:
        base = _strip_suffix(name, RAW_SUFFIX, encrypted_fields)
        if base is not None:
            return base, AccessMode.RAW_WRITE
        return name, AccessMode.PLAIN

    # _decrypted is checked before _environment.
    base = _strip_suffix(name, DECRYPTED_SUFFIX, encrypted_fields)
    if base is not None:
        return base, AccessMode.DECRYPTED
    base = _strip_suffix(name, ENVIRONMENT_SUFFIX, encrypted_fields)
    if base is not None:
        return base, AccessMode.ENVIRONMENT
    return name, AccessMode.PLAIN


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


class EncryptedAttributeInterceptor:
    """
    Wraps a host record's raw get/set with encryption for declared fields.

    The interceptor keeps no state of its own; every call reads the host's
    current value and asks the environment provider for the current label.
    """

    def __init__(
        self,
        *,
        get_raw: Callable[[str], Any],
        set_raw: Callable[[str, Any], Any],
        encrypted_fields: Iterable[str],
        encryption: Cipher,
        environment: Callable[[], str],
    ):
        self._get_raw = get_raw
        self._set_raw = set_raw
        self.encrypted_fields = frozenset(encrypted_fields)
        self._encryption = encryption
        self._environment = environment

    # -- envelope helpers ---------------------------------------------------

    def encrypt_value(self, value: Any) -> str:
        """Encrypt a value and wrap it in an envelope for the current environment."""
        return build_envelope(self._environment(), self._encryption.encrypt(str(value)))

    def environment_of(self, envelope: Any) -> str:
        parsed = parse_envelope(envelope)
        if not parsed.ok:
            raise EnvelopeError("value does not have an environment defined")
        return parsed.environment

    def decrypt_value(self, envelope: Any) -> str:
        parsed = parse_envelope(envelope)
        if not parsed.ok:
            raise EnvelopeError("value does not have an environment defined")
        if not parsed.ciphertext:
            raise DecryptionError("envelope has no ciphertext")
        return self._encryption.decrypt(parsed.ciphertext)

    # -- dispatch -----------------------------------------------------------

    def get_attribute(self, name: str) -> Any:
        base, mode = classify_field_name(name, self.encrypted_fields)
        raw = self._get_raw(base)

        if _is_blank(raw) or mode is AccessMode.PLAIN:
            return raw

        try:
            if mode is AccessMode.ENVIRONMENT:
                return self.environment_of(raw)
            return self.decrypt_value(raw)
        except EnvelopeError as exc:
            logger.warning("Attribute %s has no environment prefix", base)
            raise MissingEnvironmentError(base) from exc
        except DecryptionError as exc:
            logger.warning("Attribute %s could not be decrypted", base)
            raise DecryptionFailureError(base) from exc

    def set_attribute(self, name: str, value: Any) -> Any:
        base, mode = classify_field_name(name, self.encrypted_fields, writing=True)

        if mode is AccessMode.RAW_WRITE:
            return self._set_raw(base, value)

        if base in self.encrypted_fields and not _is_blank(value):
            value = self.encrypt_value(value)
            logger.debug("Encrypted attribute %s", base)

        return self._set_raw(base, value)
