"""
Password hashing (argon2id) and password policy.
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from core.errors import CorruptCredentialError, InvalidRequestError

MIN_PASSWORD_LENGTH = 6

# Library defaults for memory/time cost; a fresh random salt per hash.
_PH = PasswordHasher()


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise InvalidRequestError("Password is empty.")
    return _PH.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """
    Return True on match, False on mismatch.

    Raises CorruptCredentialError when the stored hash cannot be parsed.
    """
    if not password_hash:
        raise CorruptCredentialError("Stored password hash is empty.")
    try:
        return _PH.verify(password_hash, plain_password or "")
    except VerifyMismatchError:
        return False
    except InvalidHashError as exc:
        raise CorruptCredentialError("Stored password hash is malformed.") from exc
    except VerificationError as exc:
        raise CorruptCredentialError("Stored password hash could not be verified.") from exc


def validate_password_strength(password: str) -> None:
    """
    Enforce the minimum password policy: at least 6 characters with at least
    one letter and one digit.
    """
    password = password or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

    has_letter = any(c.isalpha() for c in password)
    has_digit = any(c.isdigit() for c in password)
    if not has_letter or not has_digit:
        raise InvalidRequestError("Password must contain both letters and digits.")
