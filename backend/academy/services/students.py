import re
from datetime import date
from flask import current_app
from sqlalchemy.exc import IntegrityError
from academy.extensions import db
from academy.models import Batch, Center, Student
from utils.errors import ConflictError, NotFound, ValidationError
from utils.pagination import apply_pagination_and_search, apply_search
from utils.validation import parse_id

ROLL_SEQUENCE = re.compile(r"-(\d+)$")


def center_prefix(center_name):
    """
    Roll number prefix from the center name:
    "Greater Noida" -> "GN", "Delhi" -> "DE", no name -> "STU".
    """
    words = (center_name or "").split()
    if not words:
        return "STU"
    if len(words) >= 2:
        return "".join(word[0] for word in words).upper()
    return words[0][:2].upper()


def next_roll_number(center, year=None):
    year = year or date.today().year
    prefix = f"{center_prefix(center.name)}-{year}-"

    existing = (
        Student.query.with_entities(Student.roll_number)
        .filter(Student.center_id == center.id, Student.roll_number.like(f"{prefix}%"))
        .all()
    )
    highest = 0
    for (roll_number,) in existing:
        match = ROLL_SEQUENCE.search(roll_number)
        if match:
            highest = max(highest, int(match.group(1)))

    return f"{prefix}{highest + 1:03d}"


def get_student(scope, student_id):
    student = db.session.get(Student, student_id)
    if not student:
        raise NotFound("Student not found")
    scope.ensure_student(student)
    return student


def _get_center(center_id):
    center = db.session.get(Center, center_id)
    if not center:
        raise NotFound("Center not found")
    return center


def _resolve_batch(scope, batch_id, center_id):
    """A student's batch must run in the student's own center."""
    if batch_id is None:
        return None
    batch = db.session.get(Batch, batch_id)
    if not batch:
        raise NotFound("Batch not found")
    scope.ensure_batch(batch)
    if batch.center_id != center_id:
        raise ValidationError("Batch belongs to a different center")
    return batch


def list_students(scope, batch_id=None, search=None, page=1, per_page=50):
    query = scope.filter_students(Student.query)
    if batch_id:
        query = query.filter(Student.batch_id == batch_id)
    query = query.order_by(Student.roll_number.asc())
    return apply_pagination_and_search(query, Student, search, ["name", "roll_number"], page, per_page)


def search_students(scope, term, limit=10):
    query = apply_search(scope.filter_students(Student.query), Student, term, ["name", "roll_number"])
    return query.order_by(Student.name.asc()).limit(limit).all()


def create_student(scope, name, roll_number=None, batch_id=None, center_id=None):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Student name is required")

    target_center_id = scope.target_center_id(center_id)
    center = _get_center(target_center_id)
    _resolve_batch(scope, batch_id, center.id)

    roll_number = (roll_number or "").strip() or next_roll_number(center)
    if Student.query.filter_by(center_id=center.id, roll_number=roll_number).first():
        raise ConflictError("A student with this roll number already exists")

    student = Student(name=name, roll_number=roll_number, batch_id=batch_id, center_id=center.id)
    db.session.add(student)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A student with this roll number already exists")
    return student


def update_student(scope, student_id, data):
    student = get_student(scope, student_id)

    if "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Student name is required")
        student.name = name

    if "roll_number" in data:
        roll_number = (data.get("roll_number") or "").strip()
        if not roll_number:
            raise ValidationError("Roll number is required")
        clash = Student.query.filter(
            Student.center_id == student.center_id,
            Student.roll_number == roll_number,
            Student.id != student.id,
        ).first()
        if clash:
            raise ConflictError("A student with this roll number already exists")
        student.roll_number = roll_number

    if "batch_id" in data:
        batch_id = parse_id(data.get("batch_id"), "batch_id", required=False)
        _resolve_batch(scope, batch_id, student.center_id)
        student.batch_id = batch_id

    db.session.commit()
    return student


def delete_student(scope, student_id):
    student = get_student(scope, student_id)
    db.session.delete(student)
    db.session.commit()


def assign_students_to_batch(scope, student_ids, batch_id):
    batch = db.session.get(Batch, batch_id)
    if not batch:
        raise NotFound("Batch not found")
    scope.ensure_batch(batch)
    if not student_ids:
        raise ValidationError("No students selected")

    students = Student.query.filter(Student.id.in_(student_ids)).all()
    if len(students) != len(set(student_ids)):
        raise NotFound("One or more students not found")
    for student in students:
        scope.ensure_student(student)
        if student.center_id != batch.center_id:
            raise ValidationError(f"{student.name} belongs to a different center")

    for student in students:
        student.batch_id = batch.id
    db.session.commit()
    return len(students)


def remove_student_from_batch(scope, student_id):
    student = get_student(scope, student_id)
    student.batch_id = None
    db.session.commit()
    return student


def _insert_row(name, roll_number, center_id, batch_id):
    # each row gets its own savepoint so one bad row doesn't sink the import
    with db.session.begin_nested():
        db.session.add(Student(name=name, roll_number=roll_number, center_id=center_id, batch_id=batch_id))


def create_students_bulk(scope, names, batch_id=None, center_id=None, year=None):
    """Name-only import; roll numbers are generated sequentially per center and year."""
    center = _get_center(scope.target_center_id(center_id))
    _resolve_batch(scope, batch_id, center.id)

    created = 0
    failed = []
    for raw_name in names:
        name = (raw_name or "").strip()
        if not name:
            failed.append("Empty name provided")
            continue

        roll_number = next_roll_number(center, year)
        try:
            _insert_row(name, roll_number, center.id, batch_id)
            created += 1
        except IntegrityError as e:
            failed.append(f"{name}: {e.orig}")

    db.session.commit()
    current_app.logger.info("Bulk import into center %s: %s created, %s failed", center.id, created, len(failed))
    return {"created": created, "failed": failed}


def create_students_from_rows(scope, rows, batch_id=None, center_id=None):
    """Roll number + name import (CSV); rows are inserted as given."""
    center = _get_center(scope.target_center_id(center_id))
    _resolve_batch(scope, batch_id, center.id)

    created = 0
    failed = []
    for row in rows:
        name = (row.get("name") or "").strip()
        roll_number = (row.get("roll_number") or "").strip()

        if not name:
            failed.append(f"Row with roll number {roll_number}: Empty name")
            continue
        if not roll_number:
            failed.append(f"{name}: Empty roll number")
            continue

        try:
            _insert_row(name, roll_number, center.id, batch_id)
            created += 1
        except IntegrityError:
            failed.append(f"{name}: Roll number {roll_number} already exists")

    db.session.commit()
    current_app.logger.info("CSV import into center %s: %s created, %s failed", center.id, created, len(failed))
    return {"created": created, "failed": failed}
