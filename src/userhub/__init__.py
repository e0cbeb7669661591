"""UserHub - User management backend.

Creates, reads, updates and deletes user records with email uniqueness,
Argon2 password hashing and a uniform response envelope.
"""

__version__ = "0.1.0"

from userhub.infrastructure.api.app import app

__all__ = ["app", "__version__"]
