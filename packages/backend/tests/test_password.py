"""Password hashing tests."""

from fintrack.auth.password import hash_password, verify_password


def test_hash_and_verify():
    hashed = hash_password("Str0ng!Passw0rd", rounds=4)
    assert hashed.startswith("$2")
    assert verify_password("Str0ng!Passw0rd", hashed)
    assert not verify_password("Wr0ng!Passw0rd", hashed)


def test_hashes_are_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_garbage_hash_does_not_verify():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_long_passwords_truncated_at_72_bytes():
    base = "a" * 72
    hashed = hash_password(base + "tail-one", rounds=4)
    assert verify_password(base + "tail-two", hashed)
