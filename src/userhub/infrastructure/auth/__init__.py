"""Credential infrastructure components."""

from userhub.infrastructure.auth.password_hasher import hash_password

__all__ = [
    "hash_password",
]
