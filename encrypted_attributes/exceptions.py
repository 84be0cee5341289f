"""Errors raised while reading encrypted attributes."""


class EnvelopeError(Exception):
    """A stored value has no environment prefix. Carries no attribute context."""


class EncryptedAttributeError(Exception):
    """Base class for errors scoped to a single attribute."""

    def __init__(self, attribute: str, message: str):
        super().__init__(message)
        self.attribute = attribute


class MissingEnvironmentError(EncryptedAttributeError):
    def __init__(self, attribute: str):
        super().__init__(attribute, f"attribute {attribute} does not have an environment defined")


class DecryptionFailureError(EncryptedAttributeError):
    def __init__(self, attribute: str):
        super().__init__(attribute, f"can't decrypt attribute {attribute}")
