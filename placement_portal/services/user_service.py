"""
User Repository - users and their student profiles.

A user row always exists; the student profile is optional and only
meaningful for students. Repositories hand back pydantic records, never
raw rows.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, or_, select, update

from placement_portal.db.postgres import get_db_session
from placement_portal.db.tables import student_profiles, users
from placement_portal.schemas.schemas import StudentProfile, User
from placement_portal.utils.dates import utcnow


def _to_user(row, profile_row=None) -> User:
    profile = None
    if profile_row is not None:
        profile = StudentProfile(
            gpa=profile_row.gpa,
            grad_year=profile_row.grad_year,
            department_id=profile_row.department_id,
            program=profile_row.program,
            has_accepted_offer=bool(profile_row.has_accepted_offer),
        )
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        role=row.role,
        name=row.name,
        student_profile=profile,
        created_at=row.created_at,
    )


class UserRepository:
    """CRUD over the users and student_profiles tables."""

    def _profiles(self, db, user_ids: List[int]) -> Dict[int, object]:
        if not user_ids:
            return {}
        rows = db.execute(
            select(student_profiles).where(student_profiles.c.user_id.in_(user_ids))
        ).fetchall()
        return {r.user_id: r for r in rows}

    def get(self, user_id: int) -> Optional[User]:
        with get_db_session() as db:
            row = db.execute(select(users).where(users.c.id == user_id)).fetchone()
            if row is None:
                return None
            profiles = self._profiles(db, [row.id])
        return _to_user(row, profiles.get(row.id))

    def get_credentials(self, login: str) -> Optional[tuple]:
        """
        Look up a user by email or username for login. An email match wins.

        Returns (User, password_hash) or None.
        """
        with get_db_session() as db:
            row = db.execute(select(users).where(users.c.email == login)).fetchone()
            if row is None:
                row = db.execute(select(users).where(users.c.username == login)).fetchone()
            if row is None:
                return None
            profiles = self._profiles(db, [row.id])
        return _to_user(row, profiles.get(row.id)), row.password_hash

    def get_password_hash(self, user_id: int) -> Optional[str]:
        with get_db_session() as db:
            return db.execute(
                select(users.c.password_hash).where(users.c.id == user_id)
            ).scalar()

    def exists(self, *identifiers: str, exclude_id: Optional[int] = None) -> bool:
        """Is any identifier taken, as either a username or an email?"""
        ids = [i for i in identifiers if i]
        if not ids:
            return False
        query = select(func.count()).select_from(users).where(
            or_(users.c.username.in_(ids), users.c.email.in_(ids))
        )
        if exclude_id is not None:
            query = query.where(users.c.id != exclude_id)
        with get_db_session() as db:
            return db.execute(query).scalar() > 0

    def list(self, role: Optional[str] = None) -> List[User]:
        query = select(users).order_by(users.c.id)
        if role:
            query = query.where(users.c.role == role)
        with get_db_session() as db:
            rows = db.execute(query).fetchall()
            profiles = self._profiles(db, [r.id for r in rows])
        return [_to_user(r, profiles.get(r.id)) for r in rows]

    def count_by_role(self, role: str) -> int:
        with get_db_session() as db:
            return db.execute(
                select(func.count()).select_from(users).where(users.c.role == role)
            ).scalar()

    def create(self, username: str, email: str, password_hash: str, role: str, name: str) -> User:
        now = utcnow()
        with get_db_session() as db:
            result = db.execute(
                users.insert().values(
                    username=username, email=email, password_hash=password_hash,
                    role=role, name=name, created_at=now, updated_at=now
                )
            )
            user_id = result.inserted_primary_key[0]
        return self.get(user_id)

    def update_profile(self, user_id: int, fields: dict) -> Optional[User]:
        if fields:
            with get_db_session() as db:
                db.execute(
                    update(users).where(users.c.id == user_id).values(**fields, updated_at=utcnow())
                )
        return self.get(user_id)

    def update_password(self, user_id: int, password_hash: str) -> None:
        with get_db_session() as db:
            db.execute(
                update(users).where(users.c.id == user_id)
                .values(password_hash=password_hash, updated_at=utcnow())
            )

    def update_role(self, user_id: int, role: str) -> Optional[User]:
        with get_db_session() as db:
            result = db.execute(
                update(users).where(users.c.id == user_id).values(role=role, updated_at=utcnow())
            )
            if result.rowcount == 0:
                return None
        return self.get(user_id)

    def upsert_student_profile(self, user_id: int, gpa: float, grad_year: int,
                               department_id: Optional[int], program: Optional[str]) -> User:
        """Create or replace the academic fields; the accepted-offer flag is left alone."""
        values = dict(gpa=gpa, grad_year=grad_year, department_id=department_id, program=program)
        with get_db_session() as db:
            result = db.execute(
                update(student_profiles).where(student_profiles.c.user_id == user_id).values(**values)
            )
            if result.rowcount == 0:
                db.execute(
                    student_profiles.insert().values(user_id=user_id, has_accepted_offer=False, **values)
                )
        return self.get(user_id)

