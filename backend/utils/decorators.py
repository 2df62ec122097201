from functools import wraps
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from academy.extensions import db
from academy.models import User, UserRole
from utils.access_control import AccessScope
from utils.responses import fail


def current_user():
    user_id = get_jwt_identity()
    if not user_id:
        return None
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


def role_required(*allowed_roles):
    """
    Validates the session, loads the caller's profile and restricts the view to
    the given roles (all roles when none are given).
    The caller's AccessScope is passed to the view as the `scope` keyword.
    Usage: @role_required(UserRole.ADMIN, UserRole.CENTRE_MANAGER)
    """
    allowed_roles = set(allowed_roles) or set(UserRole)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user = current_user()
            if not user:
                return fail("User not found", 401)

            if user.role not in allowed_roles:
                return fail("Not authorized", 403)

            kwargs["scope"] = AccessScope.for_user(user)
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def login_required(fn):
    return role_required()(fn)
