# raiz/services/funding.py
"""Funding arithmetic shared by the dashboard, explorer and "my projects" views.

Everything here is pure: no database access, no Flask context. Callers hand in
already-aggregated token totals so the same helpers work for single projects
and for grouped queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List

MAX_PROGRESS = 100.0
# Largest token amount or goal accepted anywhere; fits a 32-bit INTEGER column
MAX_TOKEN_AMOUNT = 2**31 - 1

STATUS_FILTER_COMPLETED = 'completed'
STATUS_FILTER_ACTIVE = 'active'
STATUS_FILTER_URGENT = 'urgent'
STATUS_FILTERS = (STATUS_FILTER_COMPLETED, STATUS_FILTER_ACTIVE, STATUS_FILTER_URGENT)


def raised_tokens(contributions: Iterable) -> int:
    """Sum the token quantities of *contributions* (objects or plain ints)."""
    total = 0
    for c in contributions:
        total += c if isinstance(c, int) else c.tokens
    return total


def raw_progress(raised: int, goal: int) -> float:
    if not goal or goal <= 0:
        return 0.0
    return raised / goal * 100


def progress_percent(raised: int, goal: int) -> float:
    """Percentage of *goal* reached, clamped to [0, 100]."""
    return max(0.0, min(raw_progress(raised, goal), MAX_PROGRESS))


def is_completed(raised: int, goal: int) -> bool:
    return raw_progress(raised, goal) >= MAX_PROGRESS


def is_near_deadline(deadline: date, today: date, days: int = 7) -> bool:
    """True when *deadline* is at most *days* away (past deadlines included)."""
    return deadline <= today + timedelta(days=days)


@dataclass(frozen=True)
class ProjectCard:
    id: int
    title: str
    description: str
    neighborhood: str
    deadline: date
    goal_tokens: int
    raised_tokens: int
    progress: float
    is_completed: bool
    is_near_deadline: bool
    status: str
    owner_first_name: str
    owner_last_name: str
    image_url: str | None = None
    video_url: str | None = None
    rejection_reason: str | None = None

    @property
    def owner_name(self) -> str:
        return f'{self.owner_first_name} {self.owner_last_name}'.strip()

    @property
    def remaining_tokens(self) -> int:
        return max(self.goal_tokens - self.raised_tokens, 0)


def build_card(project, raised: int, today: date, near_deadline_days: int = 7) -> ProjectCard:
    completed = is_completed(raised, project.goal_tokens)
    owner = project.owner
    return ProjectCard(
        id=project.id,
        title=project.title,
        description=project.description,
        neighborhood=project.neighborhood,
        deadline=project.deadline,
        goal_tokens=project.goal_tokens,
        raised_tokens=raised,
        progress=progress_percent(raised, project.goal_tokens),
        is_completed=completed,
        # A funded project is never flagged as urgent
        is_near_deadline=(not completed) and is_near_deadline(project.deadline, today, near_deadline_days),
        status=project.status,
        owner_first_name=owner.first_name if owner else '',
        owner_last_name=owner.last_name if owner else '',
        image_url=project.image_url,
        video_url=project.video_url,
        rejection_reason=project.rejection_reason,
    )


@dataclass(frozen=True)
class FundingSummary:
    needing_support: int
    completed: int
    total_raised: int


def summarize(cards: Iterable[ProjectCard]) -> FundingSummary:
    cards = list(cards)
    return FundingSummary(
        needing_support=sum(1 for c in cards if not c.is_completed),
        completed=sum(1 for c in cards if c.is_completed),
        total_raised=sum(c.raised_tokens for c in cards),
    )


def filter_cards(cards: Iterable[ProjectCard], search: str = '', neighborhood: str = '',
                 status: str = '') -> List[ProjectCard]:
    """Apply the explorer filters. Empty arguments disable the filter."""
    result = list(cards)

    term = (search or '').strip().lower()
    if term:
        result = [
            c for c in result
            if term in c.title.lower()
            or term in c.description.lower()
            or term in c.owner_first_name.lower()
            or term in c.owner_last_name.lower()
        ]

    if neighborhood:
        result = [c for c in result if c.neighborhood == neighborhood]

    if status == STATUS_FILTER_COMPLETED:
        result = [c for c in result if c.is_completed]
    elif status == STATUS_FILTER_ACTIVE:
        result = [c for c in result if not c.is_completed]
    elif status == STATUS_FILTER_URGENT:
        result = [c for c in result if c.is_near_deadline]

    return result


def neighborhoods(cards: Iterable[ProjectCard]) -> List[str]:
    return sorted({c.neighborhood for c in cards if c.neighborhood})
