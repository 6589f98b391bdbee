"""
Application Lifecycle

    APPLIED -> UNDER_REVIEW -> INTERVIEW -> OFFERED -> ACCEPTED
       |            |              |           |
       +------------+--------------+-----------+---> REJECTED | WITHDRAWN

Every move goes through TRANSITIONS; anything not listed there is rejected
with InvalidTransition. ACCEPTED, REJECTED and WITHDRAWN are terminal.

Who may make a move depends on the target status: the applying student
withdraws or accepts, the recruiter owning the posting moves everything
else. Admins may make any legal move.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from placement_portal.core.exceptions import Forbidden, InvalidTransition


class ApplicationStatus(str, Enum):
    APPLIED = "APPLIED"
    UNDER_REVIEW = "UNDER_REVIEW"
    INTERVIEW = "INTERVIEW"
    OFFERED = "OFFERED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"


# Declaration order above is also the canonical funnel order
CANONICAL_ORDER = list(ApplicationStatus)

# Lower-case values written by older clients
LEGACY_STATUS_MAP: Dict[str, ApplicationStatus] = {
    "pending": ApplicationStatus.APPLIED,
    "applied": ApplicationStatus.APPLIED,
    "reviewed": ApplicationStatus.UNDER_REVIEW,
    "under_review": ApplicationStatus.UNDER_REVIEW,
    "interview": ApplicationStatus.INTERVIEW,
    "offered": ApplicationStatus.OFFERED,
    "accepted": ApplicationStatus.ACCEPTED,
    "rejected": ApplicationStatus.REJECTED,
    "withdrawn": ApplicationStatus.WITHDRAWN,
}

_EXITS = frozenset({ApplicationStatus.REJECTED, ApplicationStatus.WITHDRAWN})

TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    ApplicationStatus.APPLIED: frozenset({ApplicationStatus.UNDER_REVIEW}) | _EXITS,
    ApplicationStatus.UNDER_REVIEW: frozenset({ApplicationStatus.INTERVIEW}) | _EXITS,
    ApplicationStatus.INTERVIEW: frozenset({ApplicationStatus.OFFERED}) | _EXITS,
    ApplicationStatus.OFFERED: frozenset({ApplicationStatus.ACCEPTED}) | _EXITS,
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

# Targets only the applicant (or an admin) may set
APPLICANT_TARGETS = frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.WITHDRAWN})


def normalize_status(value) -> ApplicationStatus:
    """
    Map any accepted spelling onto the canonical enum.

    'OFFERED', 'offered' and 'Offered' all give ApplicationStatus.OFFERED;
    'pending' and 'reviewed' are legacy aliases. Unknown values raise ValueError.
    """
    if isinstance(value, ApplicationStatus):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unknown application status: {value!r}")
    key = value.strip()
    if key.upper() in ApplicationStatus.__members__:
        return ApplicationStatus[key.upper()]
    try:
        return LEGACY_STATUS_MAP[key.lower()]
    except KeyError:
        raise ValueError(f"Unknown application status: {value!r}") from None


def is_terminal(status: ApplicationStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    return target in TRANSITIONS[current]


def validate_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(current.value, target.value)


def authorize_transition(
    target: ApplicationStatus,
    actor_id: int,
    actor_role: str,
    student_id: int,
    posting_owner_id: Optional[int],
) -> None:
    """
    Check that the actor may move an application to `target`.

    posting_owner_id is None when the posting has since been deleted; only
    admins and the applicant can still act on such an application.
    """
    if actor_role == "admin":
        return
    if target in APPLICANT_TARGETS:
        if actor_role == "student" and actor_id == student_id:
            return
        raise Forbidden("Only the applicant can withdraw or accept an application")
    if actor_role == "recruiter" and posting_owner_id is not None and actor_id == posting_owner_id:
        return
    raise Forbidden("Only the recruiter who owns the posting can change this status")
