# raiz/models/contribution.py
from datetime import datetime

from sqlalchemy.orm import relationship

from raiz import db


class Contribution(db.Model):
    """Tokens pledged by a user to a project. Rows are never updated."""
    __tablename__ = 'contributions'
    __table_args__ = (
        db.CheckConstraint('tokens > 0', name='ck_contributions_tokens_positive'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False, index=True)
    tokens = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = relationship('User', backref=db.backref('contributions', lazy='dynamic'))

    def __repr__(self):
        return f'<Contribution {self.tokens} tokens from User {self.user_id} to Project {self.project_id}>'
