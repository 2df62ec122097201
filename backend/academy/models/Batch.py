from academy.extensions import db
from .base import TimestampMixin, ScheduleDays

class Batch(db.Model, TimestampMixin):
    __tablename__ = 'batches'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    schedule_days = db.Column(db.Enum(ScheduleDays), nullable=False, index=True)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    faculty_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete="SET NULL"), nullable=True, index=True)
    center_id = db.Column(db.Integer, db.ForeignKey('centers.id'), nullable=False, index=True)

    faculty = db.relationship('User', back_populates='batches')
    center = db.relationship('Center', back_populates='batches')
    students = db.relationship('Student', back_populates='batch', lazy=True, order_by='Student.roll_number')
    attendance_records = db.relationship('AttendanceRecord', back_populates='batch', lazy=True, cascade="all, delete")

    __table_args__ = (
        db.UniqueConstraint('center_id', 'name', name='uq_batch_center_name'),
    )

    @property
    def timing(self):
        return f"{self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"

    def to_dict(self, include_related=False):
        data = {
            "id": self.id,
            "name": self.name,
            "schedule_days": self.schedule_days.value,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "timing": self.timing,
            "faculty_id": self.faculty_id,
            "center_id": self.center_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_related:
            data["faculty"] = {
                "id": self.faculty.id,
                "full_name": self.faculty.full_name,
                "email": self.faculty.email,
            } if self.faculty else None
            data["center"] = {"id": self.center.id, "name": self.center.name} if self.center else None

        return data
