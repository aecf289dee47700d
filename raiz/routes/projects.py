# raiz/routes/projects.py
from flask import Blueprint, current_app, flash, redirect, render_template, url_for
from flask_security import current_user, login_required
from sqlalchemy.exc import SQLAlchemyError

from raiz import db, limiter
from raiz.forms.project_form import ProjectForm
from raiz.routes.dashboard import flash_form_errors
from raiz.services import project_service
from raiz.services.project_service import ProjectError
from raiz.services.storage_service import StorageError

bp = Blueprint('projects', __name__)


@bp.route('/criar', methods=['GET', 'POST'])
@login_required
@limiter.limit("10 per hour", methods=['POST'])
def create():
    form = ProjectForm()
    if form.validate_on_submit():
        try:
            project_service.create_project(current_user, form.data, image=form.image.data)
        except StorageError as e:
            current_app.logger.info(f"Project image from user {current_user.id} refused: {e}")
            flash(f"Error creating project: {e}", 'danger')
        except ProjectError as e:
            current_app.logger.info(f"Project from user {current_user.id} refused: {e}")
            flash(str(e), 'danger')
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Error creating project for user {current_user.id}: {e}")
            flash('Error creating project. Please try again.', 'danger')
        else:
            flash('Project created and sent for approval!', 'success')
            return redirect(url_for('dashboard.dashboard'))
    elif form.is_submitted():
        flash_form_errors(form)

    return render_template('projects/create.html', form=form)


@bp.route('/meus-projetos')
@login_required
def mine():
    return render_template('projects/mine.html', projects=project_service.projects_for_owner(current_user))
