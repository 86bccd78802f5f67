import pytest

from authsvc.auth.passwords import burn_verify, hash_password, verify_password


def test_hash_is_not_plaintext_and_verifies():
    h = hash_password("secret1")
    assert h != "secret1"
    assert h.startswith("$argon2")
    assert verify_password(h, "secret1")


def test_hash_is_salted():
    assert hash_password("secret1") != hash_password("secret1")


def test_verify_rejects_wrong_or_empty():
    h = hash_password("secret1")
    assert not verify_password(h, "secret2")
    assert not verify_password(h, "")
    assert not verify_password("", "secret1")


def test_verify_rejects_garbage_hash():
    assert not verify_password("not-a-hash", "secret1")


def test_hash_rejects_empty():
    with pytest.raises(ValueError):
        hash_password("")


def test_burn_verify_never_raises():
    burn_verify("anything")
    burn_verify("")
