"""Password hashing utility using Argon2.

Provides one-way salted password hashing using the Argon2id algorithm.
"""

from argon2 import PasswordHasher

# Argon2id with the library's recommended parameters
_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    A fresh random salt is used on every call, so hashing the same password
    twice yields different strings.

    Args:
        password: The plaintext password to hash.

    Returns:
        The encoded hash string.

    Example:
        >>> hashed = hash_password("secret1")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)
