"""
Posting Repository

A posting row plus two child tables: the eligible graduation years and the
required skill ids (kept in the order the recruiter listed them). The three
are always written together inside one session.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select, update

from placement_portal.db.postgres import get_db_session
from placement_portal.db.tables import posting_grad_years, posting_required_skills, postings
from placement_portal.schemas.schemas import (
    EligibilityRules, Posting, PostingCreate, PostingStatus, PostingUpdate
)
from placement_portal.utils.dates import as_naive_utc, utcnow

logger = logging.getLogger(__name__)

# Optional columns a PUT may clear with an explicit null
NULLABLE_FIELDS = {"salary"}


def _dedupe(values: List[int]) -> List[int]:
    return list(dict.fromkeys(values))


class PostingRepository:

    def _children(self, db, posting_ids: List[int]):
        years: Dict[int, List[int]] = {pid: [] for pid in posting_ids}
        skill_ids: Dict[int, List[int]] = {pid: [] for pid in posting_ids}
        if not posting_ids:
            return years, skill_ids

        for row in db.execute(
            select(posting_grad_years)
            .where(posting_grad_years.c.posting_id.in_(posting_ids))
            .order_by(posting_grad_years.c.grad_year)
        ):
            years[row.posting_id].append(row.grad_year)

        for row in db.execute(
            select(posting_required_skills)
            .where(posting_required_skills.c.posting_id.in_(posting_ids))
            .order_by(posting_required_skills.c.position)
        ):
            skill_ids[row.posting_id].append(row.skill_id)

        return years, skill_ids

    def _to_posting(self, row, years: List[int], skill_ids: List[int]) -> Posting:
        return Posting(
            id=row.id,
            title=row.title,
            description=row.description,
            type=row.type,
            recruiter_id=row.recruiter_id,
            deadline=row.deadline,
            status=row.status,
            eligibility=EligibilityRules(min_gpa=row.min_gpa, grad_year=years),
            requires_verification=bool(row.requires_verification),
            required_skills=skill_ids,
            company=row.company,
            location=row.location,
            salary=row.salary,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _write_children(self, db, posting_id: int, grad_years: Optional[List[int]],
                        skill_ids: Optional[List[int]]) -> None:
        if grad_years is not None:
            db.execute(delete(posting_grad_years).where(posting_grad_years.c.posting_id == posting_id))
            db.execute(
                posting_grad_years.insert(),
                [{"posting_id": posting_id, "grad_year": y} for y in _dedupe(grad_years)]
            )
        if skill_ids is not None:
            db.execute(delete(posting_required_skills).where(posting_required_skills.c.posting_id == posting_id))
            rows = [
                {"posting_id": posting_id, "skill_id": sid, "position": i}
                for i, sid in enumerate(_dedupe(skill_ids))
            ]
            if rows:
                db.execute(posting_required_skills.insert(), rows)

    def get(self, posting_id: int) -> Optional[Posting]:
        with get_db_session() as db:
            row = db.execute(select(postings).where(postings.c.id == posting_id)).fetchone()
            if row is None:
                return None
            years, skill_ids = self._children(db, [row.id])
        return self._to_posting(row, years[row.id], skill_ids[row.id])

    def list(self, recruiter_id: Optional[int] = None,
             status: Optional[PostingStatus] = None) -> List[Posting]:
        """All postings, newest first."""
        query = select(postings).order_by(postings.c.created_at.desc(), postings.c.id.desc())
        if recruiter_id is not None:
            query = query.where(postings.c.recruiter_id == recruiter_id)
        if status is not None:
            query = query.where(postings.c.status == status.value)
        with get_db_session() as db:
            rows = db.execute(query).fetchall()
            years, skill_ids = self._children(db, [r.id for r in rows])
        return [self._to_posting(r, years[r.id], skill_ids[r.id]) for r in rows]

    def ids_for_recruiter(self, recruiter_id: int) -> List[int]:
        with get_db_session() as db:
            rows = db.execute(select(postings.c.id).where(postings.c.recruiter_id == recruiter_id)).fetchall()
        return [r.id for r in rows]

    def count(self, recruiter_id: int, status: Optional[PostingStatus] = None) -> int:
        query = select(func.count()).select_from(postings).where(postings.c.recruiter_id == recruiter_id)
        if status is not None:
            query = query.where(postings.c.status == status.value)
        with get_db_session() as db:
            return db.execute(query).scalar()

    def create(self, data: PostingCreate, recruiter_id: int) -> Posting:
        now = utcnow()
        with get_db_session() as db:
            result = db.execute(
                postings.insert().values(
                    title=data.title,
                    description=data.description,
                    type=data.type.value,
                    recruiter_id=recruiter_id,
                    deadline=as_naive_utc(data.deadline),
                    status=data.status.value,
                    min_gpa=data.eligibility.min_gpa,
                    requires_verification=data.requires_verification,
                    company=data.company,
                    location=data.location,
                    salary=data.salary,
                    created_at=now,
                    updated_at=now,
                )
            )
            posting_id = result.inserted_primary_key[0]
            self._write_children(db, posting_id, data.eligibility.grad_year, data.required_skills)
        logger.info("Posting %s created by recruiter %s", posting_id, recruiter_id)
        return self.get(posting_id)

    def update(self, posting_id: int, data: PostingUpdate) -> Optional[Posting]:
        """Merge the provided fields into the posting. Unset fields are kept."""
        fields = data.model_dump(exclude_unset=True, exclude={"eligibility", "required_skills"})
        for key in ("type", "status"):
            if fields.get(key) is not None:
                fields[key] = fields[key].value
        if "deadline" in fields:
            fields["deadline"] = as_naive_utc(fields["deadline"])
        fields = {k: v for k, v in fields.items() if v is not None or k in NULLABLE_FIELDS}
        grad_years = None
        if data.eligibility is not None:
            fields["min_gpa"] = data.eligibility.min_gpa
            grad_years = data.eligibility.grad_year

        with get_db_session() as db:
            result = db.execute(
                update(postings).where(postings.c.id == posting_id).values(**fields, updated_at=utcnow())
            )
            if result.rowcount == 0:
                return None
            self._write_children(db, posting_id, grad_years, data.required_skills)
        logger.info("Posting %s updated (%s)", posting_id, ", ".join(sorted(fields)) or "no fields")
        return self.get(posting_id)

    def delete(self, posting_id: int) -> Optional[Posting]:
        """Delete a posting and its child rows. Applications are left untouched."""
        posting = self.get(posting_id)
        if posting is None:
            return None
        with get_db_session() as db:
            db.execute(delete(posting_grad_years).where(posting_grad_years.c.posting_id == posting_id))
            db.execute(delete(posting_required_skills).where(posting_required_skills.c.posting_id == posting_id))
            db.execute(delete(postings).where(postings.c.id == posting_id))
        logger.info("Posting %s deleted", posting_id)
        return posting
