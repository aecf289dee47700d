# raiz/services/project_service.py
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List

from flask import current_app
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from raiz import cache, db
from raiz.models import Contribution, Project, ProjectStatus, User
from raiz.services.funding import MAX_TOKEN_AMOUNT, ProjectCard, build_card
from raiz.services.storage_service import PROJECT_IMAGES_BUCKET, StorageService

logger = logging.getLogger(__name__)

PROJECT_FIELDS = ('title', 'description', 'neighborhood', 'goal_tokens', 'deadline', 'video_url')


class ProjectError(Exception):
    """Raised when a proposal carries values the platform cannot store."""
    pass


def _raised_subquery():
    return (
        db.session.query(
            Contribution.project_id.label('project_id'),
            func.sum(Contribution.tokens).label('raised'),
        )
        .group_by(Contribution.project_id)
        .subquery()
    )


def _cards_for(query) -> List[ProjectCard]:
    """Attach raised-token totals to the projects selected by *query*."""
    totals = _raised_subquery()
    rows = (
        query.add_columns(func.coalesce(totals.c.raised, 0))
        .outerjoin(totals, totals.c.project_id == Project.id)
        .options(joinedload(Project.owner))
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )
    today = date.today()
    days = current_app.config.get('RAIZ_NEAR_DEADLINE_DAYS', 7)
    return [build_card(project, int(raised), today, days) for project, raised in rows]


def raised_for(project: Project) -> int:
    total = (
        db.session.query(func.coalesce(func.sum(Contribution.tokens), 0))
        .filter(Contribution.project_id == project.id)
        .scalar()
    )
    return int(total)


@cache.memoize()
def approved_project_cards() -> List[ProjectCard]:
    """Approved projects, newest first, with their funding progress.

    Pending and rejected proposals are never part of this list.
    """
    query = db.session.query(Project).filter(Project.status == ProjectStatus.APPROVED)
    cards = _cards_for(query)
    logger.debug(f"Computed {len(cards)} approved project cards")
    return cards


def invalidate_listing() -> None:
    cache.delete_memoized(approved_project_cards)


def projects_for_owner(user: User) -> List[ProjectCard]:
    return _cards_for(db.session.query(Project).filter(Project.owner_id == user.id))


def user_stats(user: User) -> Dict[str, int]:
    created = Project.query.filter_by(owner_id=user.id).count()
    supported = (
        db.session.query(func.count(func.distinct(Contribution.project_id)))
        .filter(Contribution.user_id == user.id)
        .scalar()
    )
    return {
        'tokens_available': user.tokens_available or 0,
        'projects_created': created,
        'projects_supported': supported or 0,
    }


def create_project(owner: User, data: Dict, image=None) -> Project:
    """Insert a new proposal in *pending* status.

    *image*, when given, is stored in the project images bucket first; a
    ``StorageError`` aborts the creation before anything is written, as does
    a ``ProjectError`` for an out-of-range goal.
    """
    goal = data.get('goal_tokens')
    if isinstance(goal, bool) or not isinstance(goal, int) or not 0 < goal <= MAX_TOKEN_AMOUNT:
        raise ProjectError(f"The goal must be between 1 and {MAX_TOKEN_AMOUNT} tokens.")

    image_url = None
    if image is not None and getattr(image, 'filename', None):
        image_url = StorageService.upload_public(PROJECT_IMAGES_BUCKET, image)

    values = {key: data.get(key) for key in PROJECT_FIELDS}
    if not values.get('video_url'):
        values['video_url'] = None

    project = Project(
        owner_id=owner.id,
        image_url=image_url,
        status=ProjectStatus.PENDING,
        **values,
    )
    db.session.add(project)
    db.session.commit()
    logger.info(f"User {owner.id} created project {project.id} '{project.title}' (pending)")
    return project
