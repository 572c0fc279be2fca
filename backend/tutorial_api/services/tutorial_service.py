"""
Tutorial API - Tutorial Service (Data Access Layer)
===================================================

What:  Create/read/update/delete operations against the `tutorials` collection.
How:   Wraps a Motor collection handle; converts documents to `Tutorial`
       response models and driver errors to DatabaseError.
Who:   Constructed per request by `get_tutorial_service` and called by the
       route handlers in routes/tutorials.py.

Error Handling Strategy:
    - A missing document raises NotFoundError (→ 404).
    - Any PyMongoError raises DatabaseError carrying the driver's message (→ 500).
    - Input validation has already happened in the schemas, so the service
      trusts the TutorialCreate/TutorialUpdate it receives.

Atomicity is whatever MongoDB gives a single-document write; delete_all is a
single delete_many.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from tutorial_api.database import MongoDatabase, get_database
from tutorial_api.exceptions import DatabaseError, NotFoundError
from tutorial_api.models.tutorial import TutorialDocument, parse_object_id, utcnow
from tutorial_api.schemas.tutorial import Tutorial, TutorialCreate, TutorialUpdate

logger = logging.getLogger(__name__)


def build_title_filter(title: Optional[str]) -> Dict[str, Any]:
    """
    Query document for a case-insensitive substring match on `title`.

    The substring is matched literally. None, empty and whitespace-only
    values produce an empty query (all documents).
    """
    if title is None or not title.strip():
        return {}
    return {"title": {"$regex": re.escape(title), "$options": "i"}}


def _database_error(exc: PyMongoError, fallback: str, **context: Any) -> DatabaseError:
    context["error_type"] = type(exc).__name__
    return DatabaseError(message=str(exc) or fallback, context=context)


class TutorialService:
    """
    Data access for Tutorial documents.

    Responsibilities:
        - create(), update(), delete_by_id(), delete_all(): mutations
        - find_all(), find_by_id(), find_all_published(): reads
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def create(self, data: TutorialCreate) -> Tutorial:
        """
        Insert a new tutorial and return it with its generated id.

        Raises:
            DatabaseError: insert_one failed
        """
        document = TutorialDocument(
            title=data.title,
            description=data.description,
            published=data.published,
        )
        try:
            result = await self.collection.insert_one(document.to_document())
        except PyMongoError as e:
            logger.error("Database error creating tutorial: %s", str(e))
            raise _database_error(e, "Some error occurred while creating the Tutorial.")

        document.id = result.inserted_id
        logger.info("Tutorial created: %s", document.id)
        return Tutorial.from_document(document)

    async def find_all(self, title: Optional[str] = None) -> List[Tutorial]:
        """
        List tutorials in insertion order, optionally filtered by title substring.

        Args:
            title: case-insensitive substring; blank means no filter
        """
        return await self._find(build_title_filter(title), "retrieving tutorials")

    async def find_all_published(self) -> List[Tutorial]:
        """List only tutorials with published = true."""
        return await self._find({"published": True}, "retrieving published tutorials")

    async def find_by_id(self, tutorial_id: str) -> Tutorial:
        """
        Fetch a single tutorial.

        A malformed id cannot match any document and is reported as not found.

        Raises:
            NotFoundError: no tutorial with this id
            DatabaseError: find_one failed
        """
        object_id = parse_object_id(tutorial_id)
        if object_id is None:
            raise self._not_found(tutorial_id, f"Not found Tutorial with id {tutorial_id}")

        try:
            doc = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Database error fetching tutorial %s: %s", tutorial_id, str(e))
            raise _database_error(
                e, f"Error retrieving Tutorial with id={tutorial_id}", tutorial_id=tutorial_id
            )

        if doc is None:
            raise self._not_found(tutorial_id, f"Not found Tutorial with id {tutorial_id}")

        return Tutorial.from_document(TutorialDocument.from_document(doc))

    async def update(self, tutorial_id: str, data: TutorialUpdate) -> bool:
        """
        Apply a partial update: only the fields the client sent are `$set`.

        Returns:
            True when a document matched and was updated

        Raises:
            NotFoundError: no tutorial with this id
            DatabaseError: update_one failed
        """
        message = f"Cannot update Tutorial with id={tutorial_id}. Maybe Tutorial was not found!"
        object_id = parse_object_id(tutorial_id)
        if object_id is None:
            raise self._not_found(tutorial_id, message)

        fields = data.to_update_fields()
        fields["updated_at"] = utcnow()

        try:
            result = await self.collection.update_one({"_id": object_id}, {"$set": fields})
        except PyMongoError as e:
            logger.error("Database error updating tutorial %s: %s", tutorial_id, str(e))
            raise _database_error(
                e, f"Error updating Tutorial with id={tutorial_id}", tutorial_id=tutorial_id
            )

        if result.matched_count == 0:
            raise self._not_found(tutorial_id, message)

        logger.info("Tutorial %s updated: %s", tutorial_id, sorted(fields))
        return True

    async def delete_by_id(self, tutorial_id: str) -> None:
        """
        Remove one tutorial.

        Raises:
            NotFoundError: no tutorial with this id
            DatabaseError: delete_one failed
        """
        message = f"Cannot delete Tutorial with id={tutorial_id}. Maybe Tutorial was not found!"
        object_id = parse_object_id(tutorial_id)
        if object_id is None:
            raise self._not_found(tutorial_id, message)

        try:
            result = await self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Database error deleting tutorial %s: %s", tutorial_id, str(e))
            raise _database_error(
                e, f"Could not delete Tutorial with id={tutorial_id}", tutorial_id=tutorial_id
            )

        if result.deleted_count == 0:
            raise self._not_found(tutorial_id, message)

        logger.info("Tutorial deleted: %s", tutorial_id)

    async def delete_all(self) -> int:
        """Remove every tutorial and return how many were removed."""
        try:
            result = await self.collection.delete_many({})
        except PyMongoError as e:
            logger.error("Database error deleting all tutorials: %s", str(e))
            raise _database_error(e, "Some error occurred while removing all tutorials.")

        logger.info("Deleted %d tutorials", result.deleted_count)
        return result.deleted_count

    async def _find(self, query: Dict[str, Any], action: str) -> List[Tutorial]:
        try:
            cursor = self.collection.find(query).sort("_id", ASCENDING)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Database error %s: %s", action, str(e))
            raise _database_error(e, f"Some error occurred while {action}.")

        return [Tutorial.from_document(TutorialDocument.from_document(doc)) for doc in docs]

    @staticmethod
    def _not_found(tutorial_id: str, message: str) -> NotFoundError:
        return NotFoundError(resource="Tutorial", resource_id=tutorial_id, message=message)


# ── Dependency ────────────────────────────────────────────────────────────
def get_tutorial_service(
    database: MongoDatabase = Depends(get_database),
) -> TutorialService:
    """FastAPI dependency: a TutorialService bound to the connected collection."""
    return TutorialService(database.tutorials)
