"""
Reference data - departments and skills.

Flat id + name lookup tables, read far more often than written. Seeded at
startup with the defaults below when empty.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select

from placement_portal.db.postgres import get_db_session
from placement_portal.db.tables import departments, skills
from placement_portal.schemas.schemas import Department, Skill

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS = ["Computer Science", "Electrical Engineering"]
DEFAULT_SKILLS = ["JavaScript", "React", "Node.js"]


class ReferenceDataRepository:

    def list_departments(self) -> List[Department]:
        with get_db_session() as db:
            rows = db.execute(select(departments).order_by(departments.c.id)).fetchall()
        return [Department(id=r.id, name=r.name) for r in rows]

    def list_skills(self) -> List[Skill]:
        with get_db_session() as db:
            rows = db.execute(select(skills).order_by(skills.c.id)).fetchall()
        return [Skill(id=r.id, name=r.name) for r in rows]

    def get_department(self, department_id: int) -> Optional[Department]:
        with get_db_session() as db:
            row = db.execute(select(departments).where(departments.c.id == department_id)).fetchone()
        return Department(id=row.id, name=row.name) if row else None

    def existing_skill_ids(self, skill_ids: List[int]) -> set:
        if not skill_ids:
            return set()
        with get_db_session() as db:
            rows = db.execute(select(skills.c.id).where(skills.c.id.in_(skill_ids))).fetchall()
        return {r.id for r in rows}

    def create_department(self, name: str) -> Department:
        with get_db_session() as db:
            result = db.execute(departments.insert().values(name=name))
            return Department(id=result.inserted_primary_key[0], name=name)

    def create_skill(self, name: str) -> Skill:
        with get_db_session() as db:
            result = db.execute(skills.insert().values(name=name))
            return Skill(id=result.inserted_primary_key[0], name=name)


def seed_reference_data() -> None:
    """Insert the default departments and skills into empty tables."""
    with get_db_session() as db:
        if db.execute(select(func.count()).select_from(departments)).scalar() == 0:
            db.execute(departments.insert(), [{"name": n} for n in DEFAULT_DEPARTMENTS])
            logger.info("Seeded %d departments", len(DEFAULT_DEPARTMENTS))
        if db.execute(select(func.count()).select_from(skills)).scalar() == 0:
            db.execute(skills.insert(), [{"name": n} for n in DEFAULT_SKILLS])
            logger.info("Seeded %d skills", len(DEFAULT_SKILLS))
