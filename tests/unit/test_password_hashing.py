from passlib.hash import bcrypt

from app.infrastructure.security.password import hash_password


def test_password_hash_is_bcrypt():
    h = hash_password("s3cret-pass", rounds=4)
    assert h.startswith("$2b$") or h.startswith("$2a$")
    assert bcrypt.verify("s3cret-pass", h)
    assert not bcrypt.verify("wrong", h)


def test_password_hash_is_salted():
    assert hash_password("s3cret-pass", rounds=4) != hash_password(
        "s3cret-pass", rounds=4
    )
