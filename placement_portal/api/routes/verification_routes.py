"""
Verification Document Routes

GET /verification-docs - List documents (students: own, faculty/admin: all)
POST /verification-docs - Submit a document for review (student only)
PATCH /verification-docs/{doc_id}/status - Record a review outcome (faculty or admin)

Only metadata is stored; the file itself lives wherever `url` points.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from placement_portal.core.auth import get_current_user, require_roles
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import Forbidden, NotFound
from placement_portal.services.mongo_service import VerificationDocService
from placement_portal.services.query import paginate, resolve_limit
from placement_portal.schemas.schemas import (
    DataResponse, ListResponse, User, UserRole, VerificationDoc,
    VerificationDocCreate, VerificationStatus, VerificationStatusUpdate
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/verification-docs", tags=["Verification"])


@router.get("", response_model=ListResponse[VerificationDoc])
async def list_documents(
    status: Optional[VerificationStatus] = Query(None),
    user_id: Optional[int] = Query(None, alias="userId"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    user: User = Depends(get_current_user)
):
    if user.role == UserRole.student:
        user_id = user.id
    elif user.role == UserRole.recruiter:
        raise Forbidden("Recruiters cannot view verification documents")

    docs = VerificationDocService().list(user_id=user_id, status=status)
    items, pagination = paginate(docs, page, resolve_limit(limit, settings.default_page_size, settings.max_page_size))
    return ListResponse(data=items, pagination=pagination)


@router.post("", response_model=DataResponse[VerificationDoc], status_code=201)
async def submit_document(request: VerificationDocCreate, student: User = Depends(require_roles("student"))):
    doc = VerificationDocService().insert(
        user_id=student.id,
        doc_type=request.type,
        document_name=request.document_name,
        url=request.url,
    )
    return DataResponse(data=doc, message="Document submitted for verification")


@router.patch("/{doc_id}/status", response_model=DataResponse[VerificationDoc])
async def review_document(
    doc_id: str,
    request: VerificationStatusUpdate,
    reviewer: User = Depends(require_roles("faculty", "admin"))
):
    doc = VerificationDocService().update_status(doc_id, request.status, request.remarks)
    if doc is None:
        raise NotFound("Document not found")
    logger.info("Reviewer %s marked document %s %s", reviewer.id, doc_id, request.status.value)
    return DataResponse(data=doc, message=f"Document marked {doc.status.value}")
