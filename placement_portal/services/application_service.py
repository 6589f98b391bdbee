"""
Application Repository

Applications and their append-only status history. Creating an application
writes the APPLIED history entry in the same session; every status change
appends one more entry. History rows are never updated or deleted.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select, update

from placement_portal.db.postgres import get_db_session
from placement_portal.db.tables import application_status_history, applications, student_profiles
from placement_portal.core.exceptions import InvalidTransition
from placement_portal.schemas.schemas import Application, StatusHistoryEntry
from placement_portal.services.lifecycle import ApplicationStatus, validate_transition
from placement_portal.utils.dates import utcnow

logger = logging.getLogger(__name__)


class ApplicationRepository:

    def _history(self, db, application_ids: List[int]) -> Dict[int, List[StatusHistoryEntry]]:
        history: Dict[int, List[StatusHistoryEntry]] = {aid: [] for aid in application_ids}
        if not application_ids:
            return history
        rows = db.execute(
            select(application_status_history)
            .where(application_status_history.c.application_id.in_(application_ids))
            .order_by(application_status_history.c.changed_at, application_status_history.c.id)
        )
        for row in rows:
            history[row.application_id].append(StatusHistoryEntry(status=row.status, date=row.changed_at))
        return history

    def _to_application(self, row, history: List[StatusHistoryEntry]) -> Application:
        return Application(
            id=row.id,
            posting_id=row.posting_id,
            student_id=row.student_id,
            status=row.status,
            cover_letter=row.cover_letter,
            status_history=history,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def get(self, application_id: int) -> Optional[Application]:
        with get_db_session() as db:
            row = db.execute(select(applications).where(applications.c.id == application_id)).fetchone()
            if row is None:
                return None
            history = self._history(db, [row.id])
        return self._to_application(row, history[row.id])

    def find(self, posting_id: int, student_id: int) -> Optional[Application]:
        with get_db_session() as db:
            row_id = db.execute(
                select(applications.c.id).where(
                    applications.c.posting_id == posting_id,
                    applications.c.student_id == student_id,
                )
            ).scalar()
        return self.get(row_id) if row_id is not None else None

    def list(
        self,
        status: Optional[ApplicationStatus] = None,
        posting_id: Optional[int] = None,
        student_id: Optional[int] = None,
        posting_ids: Optional[Iterable[int]] = None,
    ) -> List[Application]:
        """
        List applications, oldest first.

        posting_ids restricts the result to a set of postings (a recruiter's
        own postings); an empty set yields no applications.
        """
        query = select(applications).order_by(applications.c.created_at, applications.c.id)
        if status is not None:
            query = query.where(applications.c.status == status.value)
        if posting_id is not None:
            query = query.where(applications.c.posting_id == posting_id)
        if student_id is not None:
            query = query.where(applications.c.student_id == student_id)
        if posting_ids is not None:
            posting_ids = list(posting_ids)
            if not posting_ids:
                return []
            query = query.where(applications.c.posting_id.in_(posting_ids))

        with get_db_session() as db:
            rows = db.execute(query).fetchall()
            history = self._history(db, [r.id for r in rows])
        return [self._to_application(r, history[r.id]) for r in rows]

    def count_by_status(self, posting_ids: Optional[Iterable[int]] = None,
                        student_id: Optional[int] = None) -> Dict[ApplicationStatus, int]:
        query = select(applications.c.status, func.count()).group_by(applications.c.status)
        if posting_ids is not None:
            posting_ids = list(posting_ids)
            if not posting_ids:
                return {}
            query = query.where(applications.c.posting_id.in_(posting_ids))
        if student_id is not None:
            query = query.where(applications.c.student_id == student_id)
        with get_db_session() as db:
            rows = db.execute(query).fetchall()
        return {ApplicationStatus(status): count for status, count in rows}

    def create(self, posting_id: int, student_id: int, cover_letter: Optional[str]) -> Application:
        now = utcnow()
        with get_db_session() as db:
            result = db.execute(
                applications.insert().values(
                    posting_id=posting_id,
                    student_id=student_id,
                    status=ApplicationStatus.APPLIED.value,
                    cover_letter=cover_letter,
                    created_at=now,
                    updated_at=now,
                )
            )
            application_id = result.inserted_primary_key[0]
            db.execute(
                application_status_history.insert().values(
                    application_id=application_id,
                    status=ApplicationStatus.APPLIED.value,
                    changed_at=now,
                )
            )
        logger.info("Application %s submitted by student %s for posting %s",
                    application_id, student_id, posting_id)
        return self.get(application_id)

    def transition(self, application: Application, target: ApplicationStatus) -> Application:
        """
        Move an application to `target` and append the history entry.

        The update only applies while the stored status still equals the one
        the caller read; if another request changed it first, nothing is
        written and InvalidTransition is raised. Entering ACCEPTED also sets
        the student's has_accepted_offer flag in the same transaction.
        """
        validate_transition(application.status, target)
        now = utcnow()
        with get_db_session() as db:
            result = db.execute(
                update(applications)
                .where(
                    applications.c.id == application.id,
                    applications.c.status == application.status.value,
                )
                .values(status=target.value, updated_at=now)
            )
            if result.rowcount == 0:
                raise InvalidTransition(application.status.value, target.value)
            db.execute(
                application_status_history.insert().values(
                    application_id=application.id,
                    status=target.value,
                    changed_at=now,
                )
            )
            if target == ApplicationStatus.ACCEPTED:
                db.execute(
                    update(student_profiles)
                    .where(student_profiles.c.user_id == application.student_id)
                    .values(has_accepted_offer=True)
                )
        logger.info("Application %s moved %s -> %s",
                    application.id, application.status.value, target.value)
        return self.get(application.id)
