"""
Analytics Aggregator

Read-only aggregations recomputed from the full collections on every call:

- placement_funnel: applications per status, canonical order, zero rows dropped
- skill_demand: how many postings require each skill, top N
- pipeline_velocity: mean days spent between consecutive statuses
- export_rows / export_csv: one flat row per application for reporting

All functions are pure; the same input always yields the same output.
"""

import csv
import io
import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from placement_portal.schemas.schemas import (
    Application, Department, FunnelEntry, Posting, Skill, SkillDemandEntry,
    User, VelocityEntry
)
from placement_portal.services.lifecycle import CANONICAL_ORDER
from placement_portal.utils.dates import days_between

SKILL_DEMAND_LIMIT = 10
UNKNOWN_SKILL = "Unknown Skill"

EXPORT_HEADERS = [
    "Application ID", "Student Name", "Student Email", "Department", "Grad Year",
    "GPA", "Posting Title", "Company", "Status", "Applied Date",
]


def placement_funnel(applications: Iterable[Application]) -> List[FunnelEntry]:
    counts = Counter(app.status for app in applications)
    return [
        FunnelEntry(stage=stage, count=counts[stage])
        for stage in CANONICAL_ORDER
        if counts[stage] > 0
    ]


def skill_demand(
    postings: Iterable[Posting],
    skills: Iterable[Skill],
    limit: int = SKILL_DEMAND_LIMIT,
) -> List[SkillDemandEntry]:
    """
    Count required skills across all postings.

    Sorted by count descending, then skill id ascending so ties are stable.
    """
    names = {s.id: s.name for s in skills}
    counts: Counter = Counter()
    for posting in postings:
        counts.update(posting.required_skills)

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        SkillDemandEntry(skill_id=skill_id, skill=names.get(skill_id, UNKNOWN_SKILL), count=count)
        for skill_id, count in ranked[:limit]
    ]


def _round_half_up(value: float, places: int = 1) -> float:
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def pipeline_velocity(applications: Iterable[Application]) -> List[VelocityEntry]:
    """
    Average elapsed days per "<from> to <to>" transition.

    Each application's history is sorted by timestamp (stable, so equal
    timestamps keep their recorded order). Buckets come out in first-seen order.
    """
    totals: Dict[str, List[float]] = {}
    for app in applications:
        history = sorted(app.status_history, key=lambda entry: entry.date)
        for prev, nxt in zip(history, history[1:]):
            name = f"{prev.status.value} to {nxt.status.value}"
            bucket = totals.setdefault(name, [0.0, 0])
            bucket[0] += days_between(prev.date, nxt.date)
            bucket[1] += 1

    return [
        VelocityEntry(stage=name, days=_round_half_up(total / count))
        for name, (total, count) in totals.items()
    ]


def export_rows(
    applications: Iterable[Application],
    users: Iterable[User],
    postings: Iterable[Posting],
    departments: Iterable[Department],
) -> List[List]:
    """
    Join applications with student, department and posting data.

    Applications whose student, student profile or posting is missing are
    skipped.
    """
    users_by_id = {u.id: u for u in users}
    postings_by_id = {p.id: p for p in postings}
    department_names = {d.id: d.name for d in departments}

    rows = []
    for app in applications:
        student: Optional[User] = users_by_id.get(app.student_id)
        posting: Optional[Posting] = postings_by_id.get(app.posting_id)
        if student is None or posting is None or student.student_profile is None:
            continue
        profile = student.student_profile
        rows.append([
            app.id,
            student.name,
            student.email,
            department_names.get(profile.department_id, "N/A"),
            profile.grad_year,
            profile.gpa,
            posting.title,
            posting.company,
            app.status.value,
            app.created_at.date().isoformat() if app.created_at else "",
        ])
    return rows


def export_csv(rows: Sequence[Sequence]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    writer.writerows(rows)
    return buffer.getvalue()
