"""
Local document store: async key -> JSON document get/set/remove.

Backed by the `documents` table of the local database. This is the
source of truth for every collection.
"""

import json
import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from salesnet.models import StoredDocument

logger = logging.getLogger(__name__)


class CorruptDocumentError(Exception):
    """A stored document is not valid JSON."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt document '{key}': {reason}")
        self.key = key
        self.reason = reason


class DocumentStore:
    """Thin key/value wrapper over a local store session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[Any]:
        """
        Read and decode a document.

        Returns:
            The decoded value, or None if the key is absent

        Raises:
            CorruptDocumentError: if the stored body is not valid JSON
        """
        doc = await self.db.get(StoredDocument, key)
        if doc is None:
            return None

        body = (doc.body or "").strip()
        if not body:
            raise CorruptDocumentError(key, "empty body")
        try:
            return json.loads(body)
        except ValueError as e:
            raise CorruptDocumentError(key, str(e)) from e

    async def set(self, key: str, value: Any) -> None:
        """Encode and store a document, replacing any previous value."""
        body = json.dumps(value, ensure_ascii=False)
        doc = await self.db.get(StoredDocument, key)
        if doc is None:
            self.db.add(StoredDocument(key=key, body=body))
        else:
            doc.body = body
        await self.db.flush()
        logger.debug(f"Stored document '{key}' ({len(body)} bytes)")

    async def remove(self, key: str) -> None:
        """Delete a document; missing keys are ignored."""
        doc = await self.db.get(StoredDocument, key)
        if doc is not None:
            await self.db.delete(doc)
            await self.db.flush()
