# raiz/routes/admin.py
from flask import Blueprint, jsonify, render_template, request, current_app
from flask_security import roles_required, current_user
from sqlalchemy.exc import SQLAlchemyError

from raiz import csrf, db
from raiz.models import Project, User
from raiz.services import moderation_service
from raiz.services.moderation_service import ModerationError

bp = Blueprint('admin', __name__, url_prefix='/admin')


@bp.before_request
def _check_csrf():
    # The JSON endpoints carry no form, so the token comes from the X-CSRFToken header
    if request.method == 'POST' and current_app.config.get('WTF_CSRF_ENABLED', True):
        csrf.protect()


USER_ACTIONS = {
    'promote': lambda user: moderation_service.promote_user(user),
    'ban': lambda user: moderation_service.ban_user(user, current_user),
    'unban': lambda user: moderation_service.unban_user(user),
}


@bp.route('')
@roles_required('admin')
def index():
    search = request.args.get('q', '').strip()
    try:
        overview = moderation_service.admin_overview()
        users = moderation_service.search_users(search)
        projects = moderation_service.search_projects(search)
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error loading admin panel: {e}", exc_info=True)
        return render_template('admin/index.html', error='Error loading admin panel data.',
                               overview=None, users=[], projects=[], search=search)

    return render_template('admin/index.html', overview=overview, users=users,
                           projects=projects, search=search, error=None)


# --------------------  API ENDPOINTS  ------------------------------------

@bp.route('/api/user/<int:user_id>/<action>', methods=['POST'])
@roles_required('admin')
def user_action(user_id, action):
    handler = USER_ACTIONS.get(action)
    if handler is None:
        return jsonify({"error": f"Unknown action: {action}"}), 404
    user = db.get_or_404(User, user_id)
    try:
        handler(user)
        return jsonify({"success": True, "is_admin": user.is_admin, "is_banned": user.is_banned})
    except ModerationError as e:
        return jsonify({"error": str(e)}), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error applying '{action}' to user {user_id}: {e}")
        return jsonify({"error": str(e)}), 500


@bp.route('/api/project/<int:project_id>/approve', methods=['POST'])
@roles_required('admin')
def approve_project(project_id):
    project = db.get_or_404(Project, project_id)
    try:
        moderation_service.approve_project(project, current_user)
        return jsonify({"success": True, "status": project.status})
    except ModerationError as e:
        return jsonify({"error": str(e)}), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error approving project {project_id}: {e}")
        return jsonify({"error": str(e)}), 500


@bp.route('/api/project/<int:project_id>/reject', methods=['POST'])
@roles_required('admin')
def reject_project(project_id):
    project = db.get_or_404(Project, project_id)
    payload = request.get_json(silent=True) or request.form
    try:
        moderation_service.reject_project(project, current_user, payload.get('reason', ''))
        return jsonify({"success": True, "status": project.status})
    except ModerationError as e:
        return jsonify({"error": str(e)}), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error rejecting project {project_id}: {e}")
        return jsonify({"error": str(e)}), 500
