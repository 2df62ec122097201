from sqlalchemy.exc import IntegrityError
from academy.extensions import db
from academy.models import Batch, Center, ScheduleDays, Student, User, UserRole
from utils.errors import ConflictError, NotFound, ValidationError
from utils.schedule import parse_time, resolve_day_type
from utils.validation import parse_enum, parse_id
from .attendance import get_batch
from .reports import batch_day_rows, student_counts

DUPLICATE_BATCH = "A batch with this name already exists"


def with_student_counts(batches):
    counts = student_counts([b.id for b in batches])
    return [dict(b.to_dict(include_related=True), student_count=counts.get(b.id, 0)) for b in batches]


def list_batches(scope, center_id=None, schedule_days=None):
    query = scope.filter_batches(Batch.query)
    if center_id:
        query = query.filter(Batch.center_id == center_id)
    if schedule_days:
        query = query.filter(Batch.schedule_days == schedule_days)
    return query.order_by(Batch.created_at.desc(), Batch.id.desc()).all()


def _faculty_id(value):
    faculty_id = parse_id(value, "faculty_id", required=False)
    if faculty_id is None:
        return None
    faculty = db.session.get(User, faculty_id)
    if not faculty or faculty.role != UserRole.FACULTY:
        raise ValidationError("Assigned faculty must be a faculty member")
    return faculty.id


def _check_timing(start_time, end_time):
    if start_time >= end_time:
        raise ValidationError("Batch must end after it starts")


def create_batch(scope, data):
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Batch name is required")
    schedule_days = parse_enum(ScheduleDays, data.get("schedule_days"), "schedule_days")
    start_time = parse_time(data.get("start_time"), "start_time")
    end_time = parse_time(data.get("end_time"), "end_time")
    _check_timing(start_time, end_time)

    center_id = scope.target_center_id(parse_id(data.get("center_id"), "center_id", required=False))
    if not db.session.get(Center, center_id):
        raise NotFound("Center not found")

    if Batch.query.filter_by(center_id=center_id, name=name).first():
        raise ConflictError(DUPLICATE_BATCH)

    batch = Batch(
        name=name,
        schedule_days=schedule_days,
        start_time=start_time,
        end_time=end_time,
        faculty_id=_faculty_id(data.get("faculty_id")),
        center_id=center_id,
    )
    db.session.add(batch)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(DUPLICATE_BATCH)
    return batch


def update_batch(scope, batch_id, data):
    batch = get_batch(scope, batch_id)

    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Batch name is required")
        clash = Batch.query.filter(Batch.center_id == batch.center_id, Batch.name == name, Batch.id != batch.id).first()
        if clash:
            raise ConflictError(DUPLICATE_BATCH)
        batch.name = name
    if "schedule_days" in data:
        batch.schedule_days = parse_enum(ScheduleDays, data.get("schedule_days"), "schedule_days")
    if "start_time" in data:
        batch.start_time = parse_time(data.get("start_time"), "start_time")
    if "end_time" in data:
        batch.end_time = parse_time(data.get("end_time"), "end_time")
    _check_timing(batch.start_time, batch.end_time)
    if "faculty_id" in data:
        batch.faculty_id = _faculty_id(data.get("faculty_id"))

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(DUPLICATE_BATCH)
    return batch


def delete_batch(scope, batch_id):
    """Students are unassigned; the batch's attendance rows go with it."""
    batch = get_batch(scope, batch_id)
    Student.query.filter_by(batch_id=batch.id).update({"batch_id": None})
    db.session.delete(batch)
    db.session.commit()


def faculty_batches_for_day(scope, day):
    """The signed-in faculty's batches meeting on `day`, with that day's counts."""
    query = Batch.query.filter(Batch.faculty_id == scope.user_id)
    day_type = resolve_day_type(day)
    if day_type is None:
        return {"day_type": None, "batches": []}
    batches = query.filter(Batch.schedule_days == day_type).order_by(Batch.start_time.asc()).all()
    return {"day_type": day_type.value, "batches": batch_day_rows(batches, day)}


def list_faculty():
    # faculty rotate across centers, so the list is never center-scoped
    return User.query.filter_by(role=UserRole.FACULTY).order_by(User.full_name.asc()).all()
