from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from academy.extensions import db
from academy.models import Batch, Center, Student, User, UserRole
from utils.errors import ConflictError, NotFound, ValidationError


def list_centers(scope):
    return scope.filter_centers(Center.query).order_by(Center.name.asc()).all()


def get_center(scope, center_id):
    center = db.session.get(Center, center_id)
    if not center:
        raise NotFound("Center not found")
    scope.ensure_center(center.id)
    return center


def _count_by_center(column, center_ids, *criteria):
    rows = (
        db.session.query(column, func.count())
        .filter(column.in_(center_ids), *criteria)
        .group_by(column)
        .all()
    )
    return dict(rows)


def with_stats(centers):
    ids = [c.id for c in centers]
    if not ids:
        return []
    batches = _count_by_center(Batch.center_id, ids)
    students = _count_by_center(Student.center_id, ids)
    managers = _count_by_center(User.center_id, ids, User.role == UserRole.CENTRE_MANAGER)
    return [
        dict(
            c.to_dict(),
            batch_count=batches.get(c.id, 0),
            student_count=students.get(c.id, 0),
            manager_count=managers.get(c.id, 0),
        )
        for c in centers
    ]


def _clean_name(name):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Center name is required")
    return name


def create_center(name):
    center = Center(name=_clean_name(name))
    db.session.add(center)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A center with this name already exists")
    return center


def update_center(scope, center_id, name):
    center = get_center(scope, center_id)
    center.name = _clean_name(name)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A center with this name already exists")
    return center


def delete_center(scope, center_id):
    center = get_center(scope, center_id)
    if Batch.query.filter_by(center_id=center.id).first():
        raise ConflictError("Cannot delete center with existing batches. Delete all batches first.")
    if User.query.filter_by(center_id=center.id, role=UserRole.CENTRE_MANAGER).first():
        raise ConflictError("Cannot delete center with assigned centre managers. Reassign them first.")
    # no batches means these students are unassigned; they go with the center
    for student in Student.query.filter_by(center_id=center.id).all():
        db.session.delete(student)
    User.query.filter_by(center_id=center.id).update({"center_id": None})
    db.session.delete(center)
    db.session.commit()
