# raiz/services/support_service.py
"""Recording token support for approved projects.

The supporter's debit and the contribution row are written in one
transaction. The debit is a conditional UPDATE, so two concurrent supports
cannot both pass a balance check that only one of them can afford.
"""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from raiz import db
from raiz.models import Contribution, Project, ProjectStatus, User
from raiz.services.funding import MAX_TOKEN_AMOUNT, is_completed
from raiz.services.project_service import invalidate_listing, raised_for

logger = logging.getLogger(__name__)


class SupportError(Exception):
    """Base class for refused or failed supports."""
    pass


class InsufficientTokensError(SupportError):
    pass


class ProjectNotSupportableError(SupportError):
    pass


def _validate_amount(tokens) -> int:
    if isinstance(tokens, bool) or not isinstance(tokens, int) or tokens <= 0:
        raise SupportError("Support must be a positive whole number of tokens.")
    if tokens > MAX_TOKEN_AMOUNT:
        raise InsufficientTokensError("You don't have enough tokens to support this project.")
    return tokens


def support_project(user: User, project_id: int, tokens: int) -> Contribution:
    tokens = _validate_amount(tokens)

    project = db.session.get(Project, project_id)
    if project is None:
        raise ProjectNotSupportableError("Project not found.")
    if project.status != ProjectStatus.APPROVED:
        raise ProjectNotSupportableError("Only approved projects can receive support.")
    if is_completed(raised_for(project), project.goal_tokens):
        raise ProjectNotSupportableError("This project has already reached its goal.")

    debit = (
        update(User)
        .where(User.id == user.id, User.tokens_available >= tokens)
        .values(tokens_available=User.tokens_available - tokens)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.session.execute(debit)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Token debit failed for user {user.id}: {e}")
        raise SupportError("Could not record your support. Please try again.") from e

    if result.rowcount != 1:
        db.session.rollback()
        logger.info(f"User {user.id} lacks {tokens} tokens to support project {project_id}")
        raise InsufficientTokensError("You don't have enough tokens to support this project.")

    contribution = Contribution(user_id=user.id, project_id=project.id, tokens=tokens)
    try:
        db.session.add(contribution)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Contribution insert failed for user {user.id}, project {project_id}: {e}")
        raise SupportError("Could not record your support. Please try again.") from e

    invalidate_listing()
    logger.info(f"User {user.id} supported project {project.id} with {tokens} tokens")
    return contribution
