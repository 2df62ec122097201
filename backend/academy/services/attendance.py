from flask import current_app
from academy.extensions import db
from academy.models import AttendanceRecord, AttendanceStatus, Batch, Student
from utils.errors import NotFound, ValidationError
from utils.validation import parse_enum, parse_id


def get_batch(scope, batch_id):
    batch = db.session.get(Batch, batch_id)
    if not batch:
        raise NotFound("Batch not found")
    scope.ensure_batch(batch)
    return batch


def get_batch_students(scope, batch_id):
    batch = get_batch(scope, batch_id)
    return Student.query.filter_by(batch_id=batch.id).order_by(Student.roll_number.asc()).all()


def get_attendance_for_date(scope, batch_id, day):
    batch = get_batch(scope, batch_id)
    return (
        AttendanceRecord.query.join(Student)
        .filter(AttendanceRecord.batch_id == batch.id, AttendanceRecord.date == day)
        .order_by(Student.roll_number.asc())
        .all()
    )


def _clean_records(batch, records):
    if not isinstance(records, list) or not records:
        raise ValidationError("No attendance records supplied")

    enrolled = {sid for (sid,) in Student.query.with_entities(Student.id).filter_by(batch_id=batch.id)}
    cleaned = []
    seen = set()
    for record in records:
        if not isinstance(record, dict):
            raise ValidationError("Each attendance record needs student_id and status")
        student_id = parse_id(record.get("student_id"), "student_id")
        status = parse_enum(AttendanceStatus, record.get("status"), "status")
        if student_id in seen:
            raise ValidationError(f"Student {student_id} appears more than once")
        if student_id not in enrolled:
            raise ValidationError(f"Student {student_id} is not enrolled in this batch")
        seen.add(student_id)
        cleaned.append((student_id, status))
    return cleaned


def mark_attendance(scope, batch_id, day, records):
    """
    Replaces the whole day's attendance for a batch with the submitted roster.
    Every earlier row for (batch, day) is deleted, including students missing from
    this submission, and one row per record is inserted, stamped with the marker.
    Delete and insert commit together, so readers never see an empty day.
    """
    batch = get_batch(scope, batch_id)
    cleaned = _clean_records(batch, records)

    try:
        AttendanceRecord.query.filter_by(batch_id=batch.id, date=day).delete()
        db.session.add_all([
            AttendanceRecord(
                student_id=student_id,
                batch_id=batch.id,
                date=day,
                status=status,
                marked_by_id=scope.user_id,
            )
            for student_id, status in cleaned
        ])
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        "Attendance marked for batch %s on %s by user %s (%s records)",
        batch.id, day.isoformat(), scope.user_id, len(cleaned),
    )
    return len(cleaned)
