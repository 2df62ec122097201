from flask import request
from utils.errors import ValidationError


def request_data():
    """JSON body when present, otherwise the submitted form fields."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data, *fields):
    missing = [field for field in fields if _blank(data.get(field))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def parse_id(value, field="id", required=True):
    if value in (None, "", "none"):
        if required:
            raise ValidationError(f"Missing {field}")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def parse_enum(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field}, expected one of: {allowed}")
