# raiz/routes/explorer.py
from flask import Blueprint, current_app, flash, render_template, request

from raiz.services import funding, project_service

bp = Blueprint('explorer', __name__)


@bp.route('/explorer')
def explorer():
    """Public catalogue of approved projects with search and filters."""
    search = request.args.get('q', '').strip()
    neighborhood = request.args.get('bairro', '').strip()
    status = request.args.get('status', '').strip()
    if status and status not in funding.STATUS_FILTERS:
        status = ''

    try:
        cards = project_service.approved_project_cards()
    except Exception as e:
        current_app.logger.error(f"Error loading explorer projects: {e}", exc_info=True)
        flash('Error loading projects.', 'danger')
        cards = []

    return render_template(
        'explorer.html',
        projects=funding.filter_cards(cards, search, neighborhood, status),
        summary=funding.summarize(cards),
        neighborhoods=funding.neighborhoods(cards),
        search=search,
        selected_neighborhood=neighborhood,
        selected_status=status,
    )
