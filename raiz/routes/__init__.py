# raiz/routes/__init__.py

from flask import Blueprint, redirect, url_for

bp = Blueprint('main', __name__)


@bp.route('/')
def index():
    """Root path always lands on the dashboard; the login guard takes it from there."""
    return redirect(url_for('dashboard.dashboard'))
