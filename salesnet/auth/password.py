"""
Password hashing utilities using bcrypt.
"""

from typing import Optional

from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a plain-text password against a stored hash.

    Users without a hash (e.g. hydrated from a mirror that never stored
    one) can not log in until an admin resets them.
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
