# raiz/models/__init__.py

from .. import db  # Import the SQLAlchemy instance from the raiz package

# Import all models to ensure they're registered with SQLAlchemy
from raiz.models.user import User, Role
from raiz.models.project import Project, ProjectStatus
from raiz.models.contribution import Contribution

__all__ = [
    'db',
    'User',
    'Role',
    'Project',
    'ProjectStatus',
    'Contribution',
]
