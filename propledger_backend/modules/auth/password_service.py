"""Password hashing for user accounts."""

from passlib.hash import pbkdf2_sha256 as hasher


def hash_password(password: str) -> str:
    """Hash a plaintext password for storage."""
    return hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored hash.

    Malformed hashes count as a mismatch.
    """
    try:
        return hasher.verify(password, password_hash)
    except ValueError:
        return False
