"""
Envelope format for encrypted attribute values.

An envelope is a single string, "<environment>.<ciphertext>". The environment
is everything before the first "." and the ciphertext is everything after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SEPARATOR = "."


@dataclass(frozen=True)
class ParsedEnvelope:
    environment: str
    ciphertext: str
    ok: bool


def build_envelope(environment: str, ciphertext: str) -> str:
    return f"{environment}{SEPARATOR}{ciphertext}"


def parse_envelope(raw: Any) -> ParsedEnvelope:
    """Split a stored value into environment and ciphertext; ok=False when there is no separator."""
    environment, separator, ciphertext = str(raw).partition(SEPARATOR)
    if not separator:
        return ParsedEnvelope(environment="", ciphertext="", ok=False)
    return ParsedEnvelope(environment=environment, ciphertext=ciphertext, ok=True)
