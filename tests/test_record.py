"""Tests for in-memory records with encrypted attributes, using the real Fernet service."""

import json

import pytest

from encrypted_attributes.config import settings
from encrypted_attributes.exceptions import DecryptionFailureError, MissingEnvironmentError
from encrypted_attributes.models.record import Record
from encrypted_attributes.services.encryption import get_encryption_service


class Account(Record):
    __encrypted__ = ("access_token",)


@pytest.fixture(autouse=True)
def testing_environment(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "testing")


def _encrypt(plaintext):
    return get_encryption_service().encrypt(plaintext)


def test_non_encrypted_attribute_reads_none():
    model = Account()
    assert model.other_attribute is None
    assert model.other_attribute_decrypted is None
    assert model.other_attribute_environment is None


def test_non_encrypted_raw_suffix_is_a_literal_field():
    model = Account()
    assert model.other_attribute_raw is None

    model.other_attribute_raw = 10
    assert model.other_attribute_raw == 10
    assert model.other_attribute_decrypted is None
    assert model.other_attribute_environment is None


def test_it_sets_raw_value():
    model = Account()
    encrypted = "testing." + _encrypt("plain-text-string")
    model.access_token_raw = encrypted
    assert model.access_token == encrypted


def test_it_encrypts_on_write():
    model = Account()
    model.access_token = "secret"

    assert model.access_token != "secret"
    assert model.access_token.startswith("testing.")
    assert model.access_token_environment == "testing"
    assert model.access_token_decrypted == "secret"


def test_it_gets_none_when_using_the_raw_suffix():
    model = Account()
    model.access_token = "secret"
    assert model.access_token_raw is None


def test_it_gets_the_environment_when_using_the_environment_suffix():
    model = Account()
    for environment in ("testing", "local", "production", "staging"):
        model.access_token_raw = f"{environment}." + _encrypt("plain-text-string")
        assert model.access_token_environment == environment


def test_it_decrypts_value_from_a_different_environment():
    model = Account()
    model.access_token_raw = "some-environment." + _encrypt("plain-text-string")
    assert model.access_token_environment == "some-environment"
    assert model.access_token_decrypted == "plain-text-string"


def test_environment_change_is_seen_by_the_next_write(monkeypatch):
    model = Account()
    model.access_token = "secret"
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    model.access_token = "secret"
    assert model.access_token_environment == "production"


def test_none_write_keeps_none():
    model = Account(access_token="secret")
    model.access_token = None
    assert model.access_token is None
    assert model.access_token_decrypted is None


def test_constructor_encrypts_keyword_attributes():
    model = Account(access_token="secret", name="acme")
    assert model.access_token.startswith("testing.")
    assert model.name == "acme"
    assert model.access_token_decrypted == "secret"


def test_to_dict_serializes_encrypted_value():
    model = Account()
    encrypted = "testing." + _encrypt("plain-text-string")
    model.access_token_raw = encrypted
    assert model.to_dict() == {"access_token": encrypted}


def test_to_json_serializes_encrypted_value():
    model = Account()
    encrypted = "testing." + _encrypt("plain-text-string")
    model.access_token_raw = encrypted
    assert model.to_json() == json.dumps({"access_token": encrypted})


def test_serialization_never_exposes_plaintext():
    model = Account(access_token="secret")
    dumped = model.to_dict()
    assert dumped["access_token"] != "secret"
    assert "secret" not in model.to_json()


def test_serialization_of_malformed_value_does_not_raise():
    model = Account()
    model.access_token_raw = "no-dot-here"
    assert model.to_dict() == {"access_token": "no-dot-here"}


def test_it_throws_when_it_cant_decrypt():
    model = Account()
    model.access_token_raw = "testing.invalid-encrypted-string"
    with pytest.raises(DecryptionFailureError, match="^can't decrypt attribute access_token$"):
        model.access_token_decrypted


def test_it_throws_when_it_doesnt_have_an_environment():
    model = Account()
    model.access_token_raw = "invalid-encrypted-string"
    message = "^attribute access_token does not have an environment defined$"
    with pytest.raises(MissingEnvironmentError, match=message):
        model.access_token_decrypted
    with pytest.raises(MissingEnvironmentError, match=message):
        model.access_token_environment


def test_private_names_are_not_intercepted():
    model = Account()
    with pytest.raises(AttributeError):
        model._missing
    model._cache = "x"
    assert model._cache == "x"
    assert model.to_dict() == {}


@pytest.mark.parametrize("envelope", ["testing.", "testing.invalid-encrypted-string"])
def test_it_throws_when_the_ciphertext_is_empty_or_rejected(envelope):
    model = Account()
    model.access_token_raw = envelope
    with pytest.raises(DecryptionFailureError, match="^can't decrypt attribute access_token$"):
        model.access_token_decrypted


def test_serialization_keeps_literal_suffixed_fields_verbatim():
    model = Account()
    model.other_attribute_decrypted = "x"
    model.other_attribute_environment = "no-dot-here"
    model.other_attribute_raw = "y"

    expected = {
        "other_attribute_decrypted": "x",
        "other_attribute_environment": "no-dot-here",
        "other_attribute_raw": "y",
    }
    assert model.to_dict() == expected
    assert model.to_json() == json.dumps(expected)
