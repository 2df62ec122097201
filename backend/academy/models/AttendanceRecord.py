from academy.extensions import db
from .base import TimestampMixin, AttendanceStatus

class AttendanceRecord(db.Model, TimestampMixin):
    __tablename__ = 'attendance_records'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete="CASCADE"), nullable=False, index=True)
    batch_id = db.Column(db.Integer, db.ForeignKey('batches.id', ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False)
    marked_by_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete="SET NULL"), nullable=True)

    student = db.relationship('Student', back_populates='attendance_records')
    batch = db.relationship('Batch', back_populates='attendance_records')

    __table_args__ = (
        db.UniqueConstraint('student_id', 'batch_id', 'date', name='uq_attendance_student_batch_date'),
        db.Index('ix_attendance_batch_date', 'batch_id', 'date'),
    )

    def to_dict(self, include_student=False):
        data = {
            "id": self.id,
            "student_id": self.student_id,
            "batch_id": self.batch_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "marked_by_id": self.marked_by_id,
        }
        if include_student:
            data["student"] = {
                "id": self.student.id,
                "name": self.student.name,
                "roll_number": self.student.roll_number,
            }
        return data
