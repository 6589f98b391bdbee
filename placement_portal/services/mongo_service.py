"""
MongoDB Service - verification document storage.

Collection in this database:
1. verification_docs - documents a student submitted for faculty review
   (transcripts, resumes, ...), with the review outcome

Students create documents (always starting as pending); only faculty or
admins change the status, optionally with remarks for the student.
"""

import logging
from typing import Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from placement_portal.db.mongodb import get_collection, COLLECTIONS
from placement_portal.schemas.schemas import VerificationDoc, VerificationStatus
from placement_portal.utils.dates import utcnow

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert a MongoDB document into the API record
# ============================================================

def serialize_doc(doc: dict) -> Optional[VerificationDoc]:
    """Convert MongoDB document to a VerificationDoc (ObjectId -> str)."""
    if doc is None:
        return None
    return VerificationDoc(
        id=str(doc["_id"]),
        user_id=doc["user_id"],
        type=doc["type"],
        document_name=doc["document_name"],
        url=doc["url"],
        status=doc["status"],
        remarks=doc.get("remarks"),
        updated_at=doc.get("updated_at"),
    )


def _object_id(doc_id: str) -> Optional[ObjectId]:
    return ObjectId(doc_id) if ObjectId.is_valid(doc_id) else None


# ============================================================
# VERIFICATION DOCS COLLECTION
# ============================================================

class VerificationDocService:
    """
    Handles verification document storage and review.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["verification_docs"])

    def insert(self, user_id: int, doc_type: str, document_name: str, url: str) -> VerificationDoc:
        """
        Register a document for review.

        Args:
            user_id: owning student's user id (relational DB reference)
            doc_type: e.g. "transcript", "resume"
            document_name: file name shown to reviewers
            url: where the reviewer can open the file

        Returns:
            The stored document, status pending
        """
        now = utcnow()
        doc = {
            "user_id": user_id,
            "type": doc_type,
            "document_name": document_name,
            "url": url,
            "status": VerificationStatus.pending.value,
            "remarks": None,
            "created_at": now,
            "updated_at": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Verification document %s submitted by user %s", result.inserted_id, user_id)
        return serialize_doc(doc)

    def get_by_id(self, doc_id: str) -> Optional[VerificationDoc]:
        oid = _object_id(doc_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def list(self, user_id: Optional[int] = None,
             status: Optional[VerificationStatus] = None) -> List[VerificationDoc]:
        """Documents oldest first, optionally for one user and/or one status."""
        query: Dict = {}
        if user_id is not None:
            query["user_id"] = user_id
        if status is not None:
            query["status"] = status.value
        cursor = self.collection.find(query).sort([("created_at", 1), ("_id", 1)])
        return [serialize_doc(doc) for doc in cursor]

    def get_by_user(self, user_id: int) -> List[VerificationDoc]:
        return self.list(user_id=user_id)

    def update_status(self, doc_id: str, status: VerificationStatus,
                      remarks: Optional[str] = None) -> Optional[VerificationDoc]:
        """Record a review outcome. Returns None if the document does not exist."""
        oid = _object_id(doc_id)
        if oid is None:
            return None
        doc = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status.value, "remarks": remarks, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is not None:
            logger.info("Verification document %s marked %s", doc_id, status.value)
        return serialize_doc(doc)

    def count_by_status(self) -> Dict[VerificationStatus, int]:
        counts = {s: 0 for s in VerificationStatus}
        for row in self.collection.aggregate([{"$group": {"_id": "$status", "count": {"$sum": 1}}}]):
            counts[VerificationStatus(row["_id"])] = row["count"]
        return counts
