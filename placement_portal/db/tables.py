"""
Relational schema, declared once as SQLAlchemy Core metadata.

Tables:
- users / student_profiles: identity, role and the academic profile
- departments / skills: reference lookups
- postings + posting_grad_years + posting_required_skills
- applications + application_status_history (append-only)

applications.posting_id has no foreign key: applications outlive a deleted
posting.
"""

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, MetaData,
    String, Table, Text, UniqueConstraint
)

metadata = MetaData()

users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(100), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("name", String(200), nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

student_profiles = Table(
    "student_profiles", metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("gpa", Float, nullable=False),
    Column("grad_year", Integer, nullable=False),
    Column("department_id", Integer, ForeignKey("departments.id"), nullable=True),
    Column("program", String(200), nullable=True),
    Column("has_accepted_offer", Boolean, nullable=False, default=False),
)

departments = Table(
    "departments", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(200), nullable=False, unique=True),
)

skills = Table(
    "skills", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False, unique=True),
)

postings = Table(
    "postings", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("type", String(20), nullable=False),
    Column("recruiter_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("deadline", DateTime, nullable=False),
    Column("status", String(10), nullable=False),
    Column("min_gpa", Float, nullable=False, default=0.0),
    Column("requires_verification", Boolean, nullable=False, default=False),
    Column("company", String(200), nullable=False, default=""),
    Column("location", String(200), nullable=False, default=""),
    Column("salary", String(100), nullable=True),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

posting_grad_years = Table(
    "posting_grad_years", metadata,
    Column("posting_id", Integer, ForeignKey("postings.id", ondelete="CASCADE"), primary_key=True),
    Column("grad_year", Integer, primary_key=True),
)

posting_required_skills = Table(
    "posting_required_skills", metadata,
    Column("posting_id", Integer, ForeignKey("postings.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", Integer, primary_key=True),
    Column("position", Integer, nullable=False, default=0),
)

applications = Table(
    "applications", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("posting_id", Integer, nullable=False, index=True),
    Column("student_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("status", String(20), nullable=False),
    Column("cover_letter", Text, nullable=True),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    UniqueConstraint("posting_id", "student_id", name="uq_application_posting_student"),
)

application_status_history = Table(
    "application_status_history", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("application_id", Integer, ForeignKey("applications.id", ondelete="CASCADE"),
           nullable=False, index=True),
    Column("status", String(20), nullable=False),
    Column("changed_at", DateTime, nullable=False),
)


def init_tables(bind) -> None:
    """Create any missing tables. Safe to call on every startup."""
    metadata.create_all(bind=bind)


def drop_tables(bind) -> None:
    metadata.drop_all(bind=bind)
