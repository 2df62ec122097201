from academy.extensions import db
from .base import TimestampMixin

class Center(db.Model, TimestampMixin):
    __tablename__ = 'centers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), nullable=False, unique=True)

    batches = db.relationship('Batch', back_populates='center', lazy=True)
    students = db.relationship('Student', back_populates='center', lazy=True)
    users = db.relationship('User', back_populates='center', lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
