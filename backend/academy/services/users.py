from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from academy.extensions import db
from academy.models import AttendanceRecord, Center, User, UserRole
from utils.errors import ConflictError, NotAuthorized, NotFound, ValidationError
from utils.validation import parse_enum, parse_id


def list_users():
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()


def list_users_by_role(scope, role):
    """Managers only see admins and managers of their own center; faculty float across centers."""
    query = User.query.filter_by(role=role)
    if scope.is_manager and role != UserRole.FACULTY:
        query = query.filter(User.center_id == scope.center_id)
    return query.order_by(User.full_name.asc()).all()


def user_stats():
    counts = dict(db.session.query(User.role, func.count(User.id)).group_by(User.role).all())
    return {
        "total": sum(counts.values()),
        "admins": counts.get(UserRole.ADMIN, 0),
        "centre_managers": counts.get(UserRole.CENTRE_MANAGER, 0),
        "faculty": counts.get(UserRole.FACULTY, 0),
    }


def get_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def create_user(email, password, full_name="", role=UserRole.FACULTY, center_id=None):
    """Profile rows are provisioned out-of-band (CLI/seed), never through the API."""
    email = (email or "").strip().lower()
    if not email or not password:
        raise ValidationError("Email and password are required")
    if User.query.filter_by(email=email).first():
        raise ConflictError("A user with this email already exists")
    if role == UserRole.CENTRE_MANAGER and not center_id:
        raise ValidationError("A centre manager must be assigned to a center")

    user = User(email=email, full_name=(full_name or "").strip(), role=role, center_id=center_id)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A user with this email already exists")
    return user


def update_user(scope, user_id, updates):
    user = get_user(user_id)

    if "role" in updates:
        role = parse_enum(UserRole, updates.get("role"), "role")
        if user.id == scope.user_id and role != UserRole.ADMIN:
            raise NotAuthorized("Cannot change your own role")
        user.role = role

    if "full_name" in updates:
        full_name = (updates.get("full_name") or "").strip()
        if not full_name:
            raise ValidationError("Full name is required")
        user.full_name = full_name

    if "center_id" in updates:
        center_id = parse_id(updates.get("center_id"), "center_id", required=False)
        if center_id is not None and not db.session.get(Center, center_id):
            raise NotFound("Center not found")
        user.center_id = center_id

    if user.role == UserRole.CENTRE_MANAGER and not user.center_id:
        raise ValidationError("A centre manager must be assigned to a center")

    db.session.commit()
    return user


def delete_user(scope, user_id):
    """Removes the profile; the identity keeps existing but no longer has access."""
    if user_id == scope.user_id:
        raise NotAuthorized("Cannot delete your own account")
    user = get_user(user_id)

    AttendanceRecord.query.filter_by(marked_by_id=user.id).update({"marked_by_id": None})
    db.session.delete(user)
    db.session.commit()
