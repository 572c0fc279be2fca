"""
Tutorial API - Tutorial Document Model
======================================

What:  The shape of a document in the `tutorials` collection and its
       conversion to and from the raw dicts Motor returns.
Who:   Used by TutorialService for every read and write, and by
       MongoDatabase for the collection name.

Document layout:
    {
        "_id":         ObjectId,        server-generated, immutable
        "title":       str,             required, non-blank
        "description": str | None,
        "published":   bool,            default False
        "created_at":  datetime (UTC),
        "updated_at":  datetime (UTC),  refreshed on every update
    }

The API exposes `_id` as `id` (24-char hex string); the conversion happens
here so nothing above the service layer handles ObjectId.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId

COLLECTION_NAME = "tutorials"


def utcnow() -> datetime:
    """Current UTC time at millisecond precision, the resolution BSON stores."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


@dataclass
class TutorialDocument:
    """
    A Tutorial as stored in MongoDB.

    `id` is None until the document has been inserted. A new document gets
    one clock reading for both timestamps.
    """

    title: str
    description: Optional[str] = None
    published: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[ObjectId] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = utcnow()
        if self.updated_at is None:
            self.updated_at = self.created_at

    def to_document(self) -> Dict[str, Any]:
        """Convert to a dict for insert_one; `_id` is omitted until assigned."""
        doc: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "published": self.published,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "TutorialDocument":
        """Create from a raw collection document."""
        return cls(
            id=doc["_id"],
            title=doc["title"],
            description=doc.get("description"),
            published=bool(doc.get("published", False)),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def __repr__(self) -> str:
        return f"<TutorialDocument(id={self.id}, title='{self.title}', published={self.published})>"


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Return the ObjectId for a 24-char hex string, or None if it is not one."""
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)
