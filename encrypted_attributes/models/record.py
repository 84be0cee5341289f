"""
Host records whose declared fields are stored encrypted.

HasEncryptedAttributes routes get/set through an EncryptedAttributeInterceptor.
A host supplies three hooks: raw read, raw write, and the list of fields a
dump should include. Dumps read every field by its plain name, so they contain
envelopes and never plaintext.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from encrypted_attributes.attributes.interceptor import EncryptedAttributeInterceptor
from encrypted_attributes.config import current_environment
from encrypted_attributes.services.encryption import get_encryption_service


class HasEncryptedAttributes:
    #: Names of fields stored as envelopes.
    __encrypted__ = ()

    # Hosts must implement the three hooks below.

    def _get_raw_attribute(self, name: str) -> Any:
        """Return the stored value for name, untransformed; None when unset."""
        raise NotImplementedError

    def _set_raw_attribute(self, name: str, value: Any) -> Any:
        """Store value under name exactly as given."""
        raise NotImplementedError

    def _serializable_fields(self) -> Iterable[str]:
        """Names a dump should include."""
        raise NotImplementedError

    def _attribute_interceptor(self) -> EncryptedAttributeInterceptor:
        return EncryptedAttributeInterceptor(
            get_raw=self._get_raw_attribute,
            set_raw=self._set_raw_attribute,
            encrypted_fields=type(self).__encrypted__,
            encryption=get_encryption_service(),
            environment=current_environment,
        )

    def get_attribute(self, name: str) -> Any:
        return self._attribute_interceptor().get_attribute(name)

    def set_attribute(self, name: str, value: Any) -> Any:
        return self._attribute_interceptor().set_attribute(name, value)

    def to_dict(self) -> dict[str, Any]:
        interceptor = self._attribute_interceptor()
        return {name: interceptor.get_attribute(name) for name in self._serializable_fields()}

    def to_json(self, **kwargs: Any) -> str:
        kwargs.setdefault("default", str)
        return json.dumps(self.to_dict(), **kwargs)


class Record(HasEncryptedAttributes):
    """
    In-memory record with attribute syntax.

        class Account(Record):
            __encrypted__ = ("access_token",)

        account = Account()
        account.access_token = "secret"      # stored as "<env>.<ciphertext>"
        account.access_token_decrypted       # "secret"
        account.access_token_environment     # "<env>"

    Unset attributes read as None. Names starting with "_" are ordinary
    Python attributes and bypass interception.
    """

    def __init__(self, **attributes: Any):
        object.__setattr__(self, "_attributes", {})
        interceptor = self._attribute_interceptor()
        for name, value in attributes.items():
            interceptor.set_attribute(name, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get_attribute(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self.set_attribute(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"

    def _get_raw_attribute(self, name: str) -> Any:
        return self._attributes.get(name)

    def _set_raw_attribute(self, name: str, value: Any) -> Any:
        self._attributes[name] = value
        return value

    def _serializable_fields(self) -> Iterable[str]:
        return list(self._attributes)
