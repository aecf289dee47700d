# raiz/__init__.py
"""Flask application factory and extension initialization."""

from __future__ import annotations

import logging
from datetime import datetime

import click
from dotenv import load_dotenv
from flask import Flask, jsonify, render_template, request
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_mail import Mail
from flask_migrate import Migrate
from flask_security import Security, SQLAlchemyUserDatastore, user_registered
from flask_session import Session
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect
from sqlalchemy import inspect, text

from config import get_config

# ---------------------------------------------------------------------------
# Extension instances (singletons that will be imported elsewhere)
# ---------------------------------------------------------------------------

db = SQLAlchemy()
migrate = Migrate()
csrf = CSRFProtect()
mail = Mail()
sess = Session()
cache = Cache()
security = Security()
limiter = Limiter(key_func=get_remote_address, default_limits=["2000 per day", "300 per hour"])

logger = logging.getLogger(__name__)

DEFAULT_ROLES = {
    'admin': 'Administrator',
    'user': 'Platform member',
}


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_app(test_config: dict | None = None):
    """Application factory used by run.py and WSGI servers."""
    load_dotenv()

    app = Flask(__name__)

    # Config
    app.config.from_object(get_config())
    if test_config is not None:
        app.config.update(test_config)

    # Logging defaults
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
    logging.getLogger("flask_security").setLevel(logging.INFO)

    # ---------------------------------------------------------------------
    # Extension init
    # ---------------------------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    mail.init_app(app)
    sess.init_app(app)
    cache.init_app(app)
    limiter.init_app(app)

    # ---------------------------------------------------------------------
    # Database bootstrap & security setup (inside app context)
    # ---------------------------------------------------------------------
    with app.app_context():
        from raiz.models import User, Role  # avoid circular imports at top-level
        from raiz.forms.custom_login_form import CustomLoginForm
        from raiz.forms.custom_register_form import CustomRegisterForm
        from raiz.services.mail_service import FlaskMailUtil

        inspector = inspect(db.engine)
        if not inspector.has_table("users"):
            db.create_all()
            app.logger.info("Initial database tables created.")

        # Sanity query so we fail fast if DB unreachable
        db.session.execute(text("SELECT 1"))

        user_datastore = SQLAlchemyUserDatastore(db, User, Role)
        security.init_app(
            app,
            user_datastore,
            register_form=CustomRegisterForm,
            login_form=CustomLoginForm,
            mail_util_cls=FlaskMailUtil,
            flash_messages=True,
        )

        for name, description in DEFAULT_ROLES.items():
            user_datastore.find_or_create_role(name=name, description=description)
        db.session.commit()

        # New members get the starting token grant and the plain user role
        @user_registered.connect_via(app)  # pylint: disable=unused-variable
        def _grant_starting_tokens(sender, user, **extra):  # noqa: ANN001
            user.tokens_available = app.config["RAIZ_STARTING_TOKENS"]
            user_datastore.add_role_to_user(user, "user")
            app.logger.info(f"Registered {user.email} with {user.tokens_available} starting tokens")

    # ---------------------------------------------------------------------
    # Blueprints
    # ---------------------------------------------------------------------
    from raiz.routes import bp as main_bp
    from raiz.routes.auth import bp as auth_bp
    from raiz.routes.dashboard import bp as dashboard_bp
    from raiz.routes.explorer import bp as explorer_bp
    from raiz.routes.projects import bp as projects_bp
    from raiz.routes.profile import bp as profile_bp
    from raiz.routes.admin import bp as admin_bp
    from raiz.routes.uploads import bp as uploads_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp, url_prefix="/dashboard")
    app.register_blueprint(explorer_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(uploads_bp)

    # ---------------------------------------------------------------------
    # Error handlers & health
    # ---------------------------------------------------------------------
    @app.errorhandler(404)
    def _404(e):  # noqa: D401
        if request.path.startswith("/admin/api/"):
            return jsonify({"error": "Not Found", "message": str(e)}), 404
        return render_template("404.html"), 404

    @app.errorhandler(413)
    def _413(e):  # noqa: D401
        return jsonify({"error": "Uploaded file is too large"}), 413

    @app.errorhandler(500)
    def _500(e):  # noqa: D401
        logger.error("Unhandled 500: %s", e, exc_info=True)
        return jsonify({"error": "Internal Server Error"}), 500

    @app.route("/health")
    def _health():
        return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}, 200

    @app.context_processor
    def _inject_helpers():
        return {"now_year": lambda: datetime.utcnow().year}

    # ---------------------------------------------------------------------
    # CLI
    # ---------------------------------------------------------------------
    @app.cli.command("create-admin")
    @click.argument("email")
    def create_admin(email):
        """Grant the admin role to an existing account."""
        from raiz.services.moderation_service import promote_user

        user = user_datastore.find_user(email=email)
        if user is None:
            raise click.ClickException(f"No user registered with {email}")
        if promote_user(user):
            click.echo(f"{email} is now an administrator")
        else:
            click.echo(f"{email} already has the admin role")

    return app
