"""Password hashing helpers."""

import hashlib

from app.services.auth_service import generate_salt, hash_password, verify_password


def test_hash_is_sha256_of_password_and_salt():
    assert hash_password("secret", "abc") == hashlib.sha256(b"secretabc").hexdigest()


def test_salts_are_random_hex():
    first, second = generate_salt(), generate_salt()
    assert first != second
    assert len(first) == 32
    int(first, 16)


def test_verify_password():
    salt = generate_salt()
    stored = hash_password("correct horse", salt)
    assert verify_password("correct horse", salt, stored)
    assert not verify_password("wrong horse", salt, stored)
    assert not verify_password("correct horse", generate_salt(), stored)
