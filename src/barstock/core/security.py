"""Password hashing for directory accounts (argon2 via pwdlib)."""

from pwdlib import PasswordHash

password_hash = PasswordHash.recommended()


def hash_password(password: str) -> str:
    """Hash a password for storage on the account row."""
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login attempt against the stored hash."""
    return password_hash.verify(plain_password, hashed_password)


def verify_and_refresh(plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Verify a password and return a fresh hash when the stored one uses outdated parameters.

    Returns (valid, new_hash). new_hash is None when the stored hash is current.
    """
    return password_hash.verify_and_update(plain_password, hashed_password)
