"""
Campus Placement Portal
REST backend for students, recruiters, faculty and admins.

Architecture:
- Relational DB (SQLAlchemy): users, postings, applications, reference data
- MongoDB: verification documents reviewed by faculty
- Pure domain logic: application lifecycle, eligibility, analytics
"""

__version__ = "1.0.0"
