"""Authentication module."""

from salesnet.auth.jwt import create_access_token, verify_token
from salesnet.auth.password import hash_password, verify_password

__all__ = [
    "create_access_token",
    "verify_token",
    "hash_password",
    "verify_password",
]
