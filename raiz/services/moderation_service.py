# raiz/services/moderation_service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy import func, or_

from raiz import db, security
from raiz.models import Project, ProjectStatus, User
from raiz.services.project_service import invalidate_listing

logger = logging.getLogger(__name__)


class ModerationError(Exception):
    """Raised when a moderation action is not allowed."""
    pass


# -----------------------
# Projects
# -----------------------

def _decide(project: Project, admin: User, status: str, reason: str | None = None) -> Project:
    if not project.is_pending:
        raise ModerationError(f"Project {project.id} was already {project.status}.")
    project.status = status
    project.rejection_reason = reason
    project.moderated_at = datetime.utcnow()
    project.moderated_by_id = admin.id
    db.session.commit()
    invalidate_listing()
    logger.info(f"Admin {admin.id} set project {project.id} to {status}")
    return project


def approve_project(project: Project, admin: User) -> Project:
    return _decide(project, admin, ProjectStatus.APPROVED)


def reject_project(project: Project, admin: User, reason: str) -> Project:
    reason = (reason or '').strip()
    if not reason:
        raise ModerationError("A rejection reason is required.")
    return _decide(project, admin, ProjectStatus.REJECTED, reason)


# -----------------------
# Users
# -----------------------

def promote_user(user: User) -> bool:
    """Grant the admin role. Returns False when the user already had it."""
    added = security.datastore.add_role_to_user(user, 'admin')
    db.session.commit()
    if added:
        logger.info(f"User {user.id} promoted to admin")
    return added


def ban_user(user: User, admin: User) -> None:
    if user.id == admin.id:
        raise ModerationError("You cannot ban your own account.")
    security.datastore.deactivate_user(user)
    db.session.commit()
    logger.info(f"Admin {admin.id} banned user {user.id}")


def unban_user(user: User) -> None:
    security.datastore.activate_user(user)
    db.session.commit()
    logger.info(f"User {user.id} unbanned")


# -----------------------
# Overview & search
# -----------------------

def admin_overview() -> Dict[str, int]:
    by_status = dict(
        db.session.query(Project.status, func.count(Project.id))
        .group_by(Project.status)
        .all()
    )
    active = User.query.filter(User.active.is_(True)).count()
    banned = User.query.filter(User.active.is_(False)).count()
    return {
        'total_proposals': sum(by_status.values()),
        'pending': by_status.get(ProjectStatus.PENDING, 0),
        'approved': by_status.get(ProjectStatus.APPROVED, 0),
        'rejected': by_status.get(ProjectStatus.REJECTED, 0),
        'active_users': active,
        'banned_users': banned,
    }


def search_users(term: str = '') -> List[User]:
    query = User.query
    if term:
        ilike = f"%{term}%"
        query = query.filter(
            or_(
                User.first_name.ilike(ilike),
                User.last_name.ilike(ilike),
                User.email.ilike(ilike),
            )
        )
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def search_projects(term: str = '') -> List[Project]:
    query = Project.query.join(User, Project.owner_id == User.id)
    if term:
        ilike = f"%{term}%"
        query = query.filter(
            or_(
                Project.title.ilike(ilike),
                User.first_name.ilike(ilike),
            )
        )
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()
