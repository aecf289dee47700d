# raiz/models/project.py
from datetime import datetime

from sqlalchemy.orm import relationship

from raiz import db


class ProjectStatus:
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    ALL = (PENDING, APPROVED, REJECTED)


class Project(db.Model):
    __tablename__ = 'projects'
    __table_args__ = (
        db.CheckConstraint('goal_tokens > 0', name='ck_projects_goal_positive'),
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    neighborhood = db.Column(db.String(100), nullable=False)
    goal_tokens = db.Column(db.Integer, nullable=False)
    deadline = db.Column(db.Date, nullable=False)
    image_url = db.Column(db.String(500))
    video_url = db.Column(db.String(500))

    status = db.Column(db.String(20), nullable=False, default=ProjectStatus.PENDING, index=True)
    rejection_reason = db.Column(db.Text)
    moderated_at = db.Column(db.DateTime)
    moderated_by_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship('User', foreign_keys=[owner_id],
                         backref=db.backref('projects', lazy='dynamic'))
    moderated_by = relationship('User', foreign_keys=[moderated_by_id])
    contributions = relationship('Contribution', backref='project', lazy='dynamic')

    @property
    def is_pending(self):
        return self.status == ProjectStatus.PENDING

    def __repr__(self):
        return f'<Project {self.title} ({self.status}) for User {self.owner_id}>'
