"""
SQLAlchemy models with encrypted columns.

Encrypted columns hold envelopes, "<environment>.<ciphertext>", in the
database. Reading the column attribute returns the envelope. The
<column>_decrypted and <column>_environment names resolve through the
interceptor.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import Column, DateTime, String, Text

from encrypted_attributes.attributes.interceptor import (
    RAW_SUFFIX,
    AccessMode,
    classify_field_name,
)
from encrypted_attributes.models.database import Base
from encrypted_attributes.models.record import HasEncryptedAttributes


class EncryptedColumnsMixin(HasEncryptedAttributes):
    """
    Interception for declarative models.

    Mapped columns resolve through SQLAlchemy's descriptors as usual, so
    __getattr__ only sees the virtual names. Assignments and constructor
    keyword arguments, <column>_raw included, go through set_attribute.
    """

    def __init__(self, **kwargs: Any):
        cls = type(self)
        interceptor = self._attribute_interceptor()
        for name, value in kwargs.items():
            base, _ = classify_field_name(name, cls.__encrypted__, writing=True)
            if not hasattr(cls, base):
                raise TypeError(f"{name!r} is an invalid keyword argument for {cls.__name__}")
            interceptor.set_attribute(name, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        encrypted = type(self).__encrypted__
        _, mode = classify_field_name(name, encrypted)
        if mode in (AccessMode.DECRYPTED, AccessMode.ENVIRONMENT):
            return self.get_attribute(name)
        if name.endswith(RAW_SUFFIX) and name[: -len(RAW_SUFFIX)] in encrypted:
            return None
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
        else:
            self.set_attribute(name, value)

    def _get_raw_attribute(self, name: str) -> Any:
        return getattr(self, name, None)

    def _set_raw_attribute(self, name: str, value: Any) -> Any:
        super().__setattr__(name, value)
        return value

    def _serializable_fields(self) -> Iterable[str]:
        return [column.key for column in self.__table__.columns]


# ---------------------------------------------------------------------------
# Service credential: OAuth-style tokens for a third-party provider
# ---------------------------------------------------------------------------
class ServiceCredential(EncryptedColumnsMixin, Base):
    __tablename__ = "service_credentials"
    __encrypted__ = ("access_token", "refresh_token")

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    provider = Column(String(64), nullable=False)
    access_token = Column(Text, nullable=True, comment="Envelope: <environment>.<ciphertext>")
    refresh_token = Column(Text, nullable=True, comment="Envelope: <environment>.<ciphertext>")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
