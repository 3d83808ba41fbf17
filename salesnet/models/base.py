"""
Declarative bases for the local store and the remote mirror.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for local store models (documents, sync ledger)."""
    pass


class RemoteBase(DeclarativeBase):
    """Base class for the relational rows kept in the remote mirror."""
    pass
