import pytest

from auth.passwords import hash_password, validate_password_strength, verify_password
from core.errors import CorruptCredentialError, InvalidRequestError


def test_password_hash_and_verify():
    password_hash = hash_password("secret1")
    assert password_hash != "secret1"
    assert verify_password("secret1", password_hash)
    assert not verify_password("secret2", password_hash)


def test_same_password_hashes_differently():
    assert hash_password("secret1") != hash_password("secret1")


def test_verify_wrong_length_is_plain_mismatch():
    password_hash = hash_password("secret1")
    assert verify_password("", password_hash) is False
    assert verify_password("s" * 200, password_hash) is False


def test_verify_malformed_hash_raises():
    with pytest.raises(CorruptCredentialError):
        verify_password("secret1", "not-an-argon2-hash")
    with pytest.raises(CorruptCredentialError):
        verify_password("secret1", "")


def test_hash_empty_password_rejected():
    with pytest.raises(InvalidRequestError):
        hash_password("")


@pytest.mark.parametrize("password", ["abc12", "abcdefg", "1234567", ""])
def test_weak_passwords_rejected(password):
    with pytest.raises(InvalidRequestError):
        validate_password_strength(password)


def test_strong_enough_password_accepted():
    validate_password_strength("secret1")
