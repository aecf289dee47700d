"""Pytest fixtures for Flask app testing.

Provides common fixtures like `app`, `client`, `auth_client`, and `admin_client` so that
unit tests can run without repeating boilerplate setup. The fixtures use an in-memory
SQLite database and plaintext password hashing for speed. E-mail sending is suppressed,
caching and rate limiting are disabled and CSRF is turned off to simplify form
submissions during tests.

Every test runs inside an application context and the tables are emptied afterwards,
so tests never see each other's users, projects or contributions.
"""
from __future__ import annotations

from datetime import date, timedelta

import pytest
from flask_security.utils import hash_password

from raiz import create_app, db, security
from raiz.models import Contribution, Project, ProjectStatus, User
from raiz.models.user import roles_users

###############################################################################
# Core application & database fixtures
###############################################################################

@pytest.fixture(scope="session")  # one app instance for the entire test session
def app(tmp_path_factory):  # noqa: D401 (fixture name required by pytest-flask)
    """Create and configure a new app instance for this test session."""
    tmp = tmp_path_factory.mktemp("raiz")
    app = create_app(
        {
            "TESTING": True,
            "DEBUG": False,
            "SECRET_KEY": "testing-secret-key",
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "SQLALCHEMY_ENGINE_OPTIONS": {},
            # Plaintext hashing is fine for tests and avoids extra deps like argon2
            "SECURITY_PASSWORD_HASH": "plaintext",
            "SECURITY_PASSWORD_SALT": "salt",
            # Disable CSRF & e-mail sending for tests
            "WTF_CSRF_ENABLED": False,
            "MAIL_SUPPRESS_SEND": True,
            "RATELIMIT_ENABLED": False,
            "CACHE_TYPE": "NullCache",
            "SESSION_TYPE": "filesystem",
            "SESSION_FILE_DIR": str(tmp / "sessions"),
            "UPLOAD_FOLDER": str(tmp / "uploads"),
            "S3_BUCKET": None,
        }
    )

    with app.app_context():
        db.create_all()

    yield app

    # Teardown: drop all tables after the test session ends
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(autouse=True)
def _app_context(app):
    """Run each test inside an app context and empty the tables afterwards."""
    with app.app_context():
        yield
        db.session.rollback()
        Contribution.query.delete()
        Project.query.delete()
        db.session.execute(roles_users.delete())
        User.query.delete()
        db.session.commit()


@pytest.fixture
def client(app):  # override to ensure fresh client per test with our app fixture
    """Return an unauthenticated test client."""
    return app.test_client()

###############################################################################
# Helper fixtures: users & authenticated clients
###############################################################################

def _make_user(email, *, roles=("user",), tokens=100, first_name="Test", last_name="User", active=True):
    user = security.datastore.create_user(
        email=email,
        password=hash_password("password"),
        first_name=first_name,
        last_name=last_name,
        tokens_available=tokens,
        active=active,
        roles=list(roles),
    )
    db.session.commit()
    return user


@pytest.fixture
def make_user():
    return _make_user


@pytest.fixture
def regular_user():
    """A standard active member with the starting grant of 100 tokens."""
    return _make_user("testuser@example.com", first_name="Maria", last_name="Silva")


@pytest.fixture
def admin_user():
    """An admin with the *admin* role."""
    return _make_user("admin@example.com", roles=("user", "admin"), first_name="Ana", last_name="Admin")


def _login(client, email):
    response = client.post('/security/login', data={
        'email': email,
        'password': 'password'
    }, follow_redirects=False)
    assert response.status_code in [200, 302], f"Login failed with status {response.status_code}"
    return client


@pytest.fixture
def auth_client(client, regular_user):
    """A test client logged in as *regular_user*."""
    return _login(client, regular_user.email)


@pytest.fixture
def admin_client(client, admin_user):
    """A test client logged in as *admin_user*."""
    return _login(client, admin_user.email)

###############################################################################
# Domain factories
###############################################################################

@pytest.fixture
def make_project():
    def _make(owner, *, title="Community Garden", status=ProjectStatus.APPROVED, goal=100,
              neighborhood="Centro", deadline=None, description="Vegetables for the block"):
        project = Project(
            owner_id=owner.id,
            title=title,
            description=description,
            neighborhood=neighborhood,
            goal_tokens=goal,
            deadline=deadline or date.today() + timedelta(days=30),
            status=status,
        )
        db.session.add(project)
        db.session.commit()
        return project
    return _make


@pytest.fixture
def make_contribution():
    def _make(user, project, tokens):
        contribution = Contribution(user_id=user.id, project_id=project.id, tokens=tokens)
        db.session.add(contribution)
        db.session.commit()
        return contribution
    return _make
