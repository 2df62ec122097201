from sqlalchemy import func
from academy.extensions import db
from academy.models import (
    AttendanceRecord, AttendanceStatus, Batch, Center, Student, User, UserRole,
)
from utils.errors import NotFound
from utils.schedule import resolve_day_type
from .attendance import get_batch


def attendance_percentage(present, total):
    """Whole-number percentage, rounded half up; 0 when nothing was counted."""
    if not total:
        return 0
    return (200 * present + total) // (2 * total)


def student_counts(batch_ids):
    if not batch_ids:
        return {}
    rows = (
        db.session.query(Student.batch_id, func.count(Student.id))
        .filter(Student.batch_id.in_(batch_ids))
        .group_by(Student.batch_id)
        .all()
    )
    return dict(rows)


def _status_counts(batch_ids, day):
    """{batch_id: {AttendanceStatus: count}} for one date."""
    counts = {}
    if not batch_ids:
        return counts
    rows = (
        db.session.query(AttendanceRecord.batch_id, AttendanceRecord.status, func.count(AttendanceRecord.id))
        .filter(AttendanceRecord.batch_id.in_(batch_ids), AttendanceRecord.date == day)
        .group_by(AttendanceRecord.batch_id, AttendanceRecord.status)
        .all()
    )
    for batch_id, status, count in rows:
        counts.setdefault(batch_id, {})[status] = count
    return counts


def batch_day_rows(batches, day):
    """Batch-day view for each batch: enrolment, present/absent counts and whether the day was marked."""
    batch_ids = [b.id for b in batches]
    enrolled = student_counts(batch_ids)
    statuses = _status_counts(batch_ids, day)

    rows = []
    for batch in batches:
        total = enrolled.get(batch.id, 0)
        marked = statuses.get(batch.id, {})
        present = marked.get(AttendanceStatus.Present, 0)
        absent = marked.get(AttendanceStatus.Absent, 0)
        rows.append({
            "batch_id": batch.id,
            "batch_name": batch.name,
            "schedule_days": batch.schedule_days.value,
            "timing": batch.timing,
            "center": {"id": batch.center.id, "name": batch.center.name},
            "faculty": {"id": batch.faculty.id, "full_name": batch.faculty.full_name} if batch.faculty else None,
            "date": day.isoformat(),
            "total_students": total,
            "present_count": present,
            "absent_count": absent,
            "attendance_marked": (present + absent) > 0,
            "attendance_percentage": attendance_percentage(present, total),
        })
    return rows


def batch_day_summary(batch, day):
    return batch_day_rows([batch], day)[0]


def _totals(rows):
    students = sum(r["total_students"] for r in rows)
    present = sum(r["present_count"] for r in rows)
    return {
        "batches": len(rows),
        "students": students,
        "present": present,
        "absent": sum(r["absent_count"] for r in rows),
        "marked_batches": sum(1 for r in rows if r["attendance_marked"]),
        "percentage": attendance_percentage(present, students),
    }


def _scheduled_batches(query, day):
    day_type = resolve_day_type(day)
    if day_type is None:
        return []
    return query.filter(Batch.schedule_days == day_type).order_by(Batch.start_time.asc(), Batch.name.asc()).all()


def center_day_report(scope, center_id, day):
    center = db.session.get(Center, center_id)
    if not center:
        raise NotFound("Center not found")
    scope.ensure_center(center.id)

    batches = _scheduled_batches(scope.filter_batches(Batch.query.filter(Batch.center_id == center.id)), day)
    rows = batch_day_rows(batches, day)
    day_type = resolve_day_type(day)
    return {
        "center": center.to_dict(),
        "date": day.isoformat(),
        "day_type": day_type.value if day_type else None,
        "batches": rows,
        "totals": _totals(rows),
    }


def all_batches_day_report(scope, day):
    batches = _scheduled_batches(scope.filter_batches(Batch.query), day)
    return batch_day_rows(batches, day)


def faculty_day_report(scope, day):
    batches = _scheduled_batches(
        scope.filter_batches(Batch.query.filter(Batch.faculty_id.isnot(None))), day
    )
    rows_by_faculty = {}
    for row, batch in zip(batch_day_rows(batches, day), batches):
        rows_by_faculty.setdefault(batch.faculty_id, []).append(row)

    if not rows_by_faculty:
        return []

    faculty = (
        User.query.filter(User.id.in_(rows_by_faculty.keys()), User.role == UserRole.FACULTY)
        .order_by(User.full_name.asc())
        .all()
    )
    report = []
    for member in faculty:
        rows = rows_by_faculty[member.id]
        report.append({
            "id": member.id,
            "full_name": member.full_name,
            "email": member.email,
            "batches": rows,
            "total_batches": len(rows),
            "total_students": sum(r["total_students"] for r in rows),
            "total_present": sum(r["present_count"] for r in rows),
        })
    return report


def student_range_report(scope, batch_id=None, start=None, end=None):
    """Per-student totals over an optional date range and/or single batch."""
    students_query = scope.filter_students(Student.query)
    if batch_id:
        batch = get_batch(scope, batch_id)
        students_query = students_query.filter(Student.batch_id == batch.id)
    students = students_query.order_by(Student.roll_number.asc()).all()
    if not students:
        return []

    counts_query = db.session.query(
        AttendanceRecord.student_id, AttendanceRecord.status, func.count(AttendanceRecord.id)
    ).filter(AttendanceRecord.student_id.in_([s.id for s in students]))
    if batch_id:
        counts_query = counts_query.filter(AttendanceRecord.batch_id == batch_id)
    if start:
        counts_query = counts_query.filter(AttendanceRecord.date >= start)
    if end:
        counts_query = counts_query.filter(AttendanceRecord.date <= end)

    counts = {}
    for student_id, status, count in counts_query.group_by(AttendanceRecord.student_id, AttendanceRecord.status):
        counts.setdefault(student_id, {})[status] = count

    report = []
    for student in students:
        present = counts.get(student.id, {}).get(AttendanceStatus.Present, 0)
        absent = counts.get(student.id, {}).get(AttendanceStatus.Absent, 0)
        total = present + absent
        report.append({
            "student_id": student.id,
            "student_name": student.name,
            "roll_number": student.roll_number,
            "batch_name": student.batch.name if student.batch else "Unknown",
            "total_classes": total,
            "present_count": present,
            "absent_count": absent,
            "percentage": attendance_percentage(present, total),
        })
    return report


def batch_details(scope, batch_id, day):
    batch = get_batch(scope, batch_id)

    statuses = {
        r.student_id: r.status.value
        for r in AttendanceRecord.query.filter_by(batch_id=batch.id, date=day)
    }
    students = Student.query.filter_by(batch_id=batch.id).order_by(Student.roll_number.asc()).all()

    lectures_completed = (
        db.session.query(func.count(func.distinct(AttendanceRecord.date)))
        .filter(AttendanceRecord.batch_id == batch.id)
        .scalar()
    )
    all_time = dict(
        db.session.query(AttendanceRecord.status, func.count(AttendanceRecord.id))
        .filter(AttendanceRecord.batch_id == batch.id)
        .group_by(AttendanceRecord.status)
        .all()
    )
    all_time_present = all_time.get(AttendanceStatus.Present, 0)
    all_time_total = sum(all_time.values())

    data = batch.to_dict(include_related=True)
    data.update({
        "students": [dict(s.to_dict(), attendance_status=statuses.get(s.id)) for s in students],
        "student_count": len(students),
        "lectures_completed": lectures_completed or 0,
        "average_attendance": round(all_time_present * 100 / all_time_total, 2) if all_time_total else 0,
        "present_today": sum(1 for status in statuses.values() if status == AttendanceStatus.Present.value),
        "attendance_marked_today": bool(statuses),
        "selected_date": day.isoformat(),
    })
    return data
