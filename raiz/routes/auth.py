# raiz/routes/auth.py
"""Public-only entry points.

Flask-Security serves the actual forms under ``/security``. These routes keep
the short public URLs and send visitors who are already signed in straight to
the dashboard instead.
"""
from flask import Blueprint, current_app, redirect, url_for, request, flash
from flask_security import current_user

from raiz import limiter

bp = Blueprint('auth', __name__)

BOT_AGENTS = ('bot', 'crawler', 'spider', 'scraper')


def _already_signed_in():
    return redirect(url_for('dashboard.dashboard'))


def _refuse_bot():
    user_agent = request.headers.get('User-Agent', '').lower()
    if not any(bot in user_agent for bot in BOT_AGENTS):
        return None
    current_app.logger.info(f"Refused registration from automated client '{user_agent}'")
    flash('Registration temporarily unavailable. Please try again later.', 'error')
    return redirect(url_for('explorer.explorer'))


@bp.before_app_request
def _guard_security_register():
    # Sign-ups posted straight to Flask-Security get the same bot check
    if request.endpoint == 'security.register' and request.method == 'POST':
        return _refuse_bot()
    return None


@bp.route('/login')
def login():
    if current_user.is_authenticated:
        return _already_signed_in()
    return redirect(url_for('security.login', next=request.args.get('next')))


# Rate-limited registration endpoint
@bp.route('/register', methods=['GET', 'POST'])
@limiter.limit("3 per minute", key_func=lambda: request.remote_addr)
@limiter.limit("10 per hour", key_func=lambda: request.remote_addr)
def register():
    if current_user.is_authenticated:
        return _already_signed_in()
    if request.method == 'POST':
        refused = _refuse_bot()
        if refused is not None:
            return refused
    return redirect(url_for('security.register'))


@bp.route('/reset-password')
def reset_password():
    if current_user.is_authenticated:
        return _already_signed_in()
    return redirect(url_for('security.forgot_password'))


@bp.route('/change-password')
def change_password():
    return redirect(url_for('security.change_password'))


@bp.route('/logout')
def logout():
    return redirect(url_for('security.logout'))
