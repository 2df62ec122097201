from academy.extensions import db
from .base import TimestampMixin

class Student(db.Model, TimestampMixin):
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    roll_number = db.Column(db.String(40), nullable=False, index=True)
    batch_id = db.Column(db.Integer, db.ForeignKey('batches.id', ondelete="SET NULL"), nullable=True, index=True)
    center_id = db.Column(db.Integer, db.ForeignKey('centers.id'), nullable=False, index=True)

    batch = db.relationship('Batch', back_populates='students')
    center = db.relationship('Center', back_populates='students')
    attendance_records = db.relationship('AttendanceRecord', back_populates='student', lazy=True, cascade="all, delete")

    __table_args__ = (
        db.UniqueConstraint('center_id', 'roll_number', name='uq_student_center_roll'),
    )

    def to_dict(self, include_related=False):
        data = {
            "id": self.id,
            "name": self.name,
            "roll_number": self.roll_number,
            "batch_id": self.batch_id,
            "center_id": self.center_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_related:
            data["batch"] = {
                "id": self.batch.id,
                "name": self.batch.name,
                "schedule_days": self.batch.schedule_days.value,
                "timing": self.batch.timing,
            } if self.batch else None
            data["center"] = {"id": self.center.id, "name": self.center.name} if self.center else None

        return data
