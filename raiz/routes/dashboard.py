# raiz/routes/dashboard.py
from flask import Blueprint, current_app, flash, redirect, render_template, url_for
from flask_security import current_user, login_required

from raiz import limiter
from raiz.forms.support_form import SupportForm
from raiz.services import project_service
from raiz.services.support_service import SupportError, support_project

bp = Blueprint('dashboard', __name__)


def flash_form_errors(form):
    """Flashes form errors to the user."""
    for field, errors in form.errors.items():
        for error in errors:
            field_label = getattr(form, field).label.text
            flash(f"Error in {field_label} field - {error}", 'danger')


@bp.route('')
@login_required
def dashboard():
    """Member home: balance, counters and the approved projects."""
    try:
        projects = project_service.approved_project_cards()
        stats = project_service.user_stats(current_user)
    except Exception as e:
        current_app.logger.error(f"Error loading dashboard for user {current_user.id}: {e}", exc_info=True)
        flash('Error loading dashboard data.', 'danger')
        projects, stats = [], {'tokens_available': 0, 'projects_created': 0, 'projects_supported': 0}

    return render_template(
        'dashboard.html',
        projects=projects,
        stats=stats,
        support_form=SupportForm(),
    )


@bp.route('/support/<int:project_id>', methods=['POST'])
@login_required
@limiter.limit("30 per minute")
def support(project_id):
    form = SupportForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('dashboard.dashboard'))

    try:
        contribution = support_project(current_user, project_id, form.tokens.data)
    except SupportError as e:
        current_app.logger.warning(f"Support by user {current_user.id} for project {project_id} refused: {e}")
        flash(str(e), 'danger')
    else:
        flash(f"Thank you! You supported this project with {contribution.tokens} tokens.", 'success')
    return redirect(url_for('dashboard.dashboard'))
