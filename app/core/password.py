"""Password hashing utilities."""

from pwdlib import PasswordHash

# pwdlib is the modern, recommended way (Argon2 by default)
password_hash = PasswordHash.recommended()

# Verified against when the email is unknown, so both paths cost one hash check
DUMMY_HASH = password_hash.hash("volunteer-connect-timing-guard")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check whether a plaintext password matches a stored hashed password.

    Returns:
        True if the plaintext password matches the hashed password, False otherwise.
    """
    return password_hash.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a plaintext password using the recommended hashing algorithm (Argon2).

    Parameters:
        password (str): Plaintext password to hash.

    Returns:
        str: Password hash suitable for secure storage.
    """
    return password_hash.hash(password)
