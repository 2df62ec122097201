from academy.models import Batch, Center, User, UserRole
from sqlalchemy import Integer, String, Enum, Time
import enum


def _center_options(scope):
    query = Center.query
    if scope:
        query = scope.filter_centers(query)
    return [{"label": center.name, "value": center.id} for center in query.order_by(Center.name).all()]


def _batch_options(scope):
    query = Batch.query
    if scope:
        query = scope.filter_batches(query)
    return [
        {"label": batch.name, "value": batch.id, "center_id": batch.center_id}
        for batch in query.order_by(Batch.name).all()
    ]


def _faculty_options():
    return [
        {"label": user.full_name or user.email, "value": user.id}
        for user in User.query.filter_by(role=UserRole.FACULTY).order_by(User.full_name).all()
    ]


def generate_schema_from_model(model, model_name, scope=None):
    exclude_fields = {"id", "created_at", "password_hash"}
    schema = []

    for column in model.__table__.columns:
        name = column.name
        if name in exclude_fields:
            continue

        field_schema = {
            "name": name,
            "label": name.replace("_", " ").title(),
            "required": not column.nullable and not column.default,
        }

        if isinstance(column.type, Enum):
            enum_class = column.type.enum_class
            field_schema["type"] = "select"
            if enum_class and issubclass(enum_class, enum.Enum):
                field_schema["options"] = [
                    {"label": e.value.replace("_", " ").title(), "value": e.value}
                    for e in enum_class
                ]
            else:
                field_schema["options"] = column.type.enums

        elif isinstance(column.type, String):
            if "email" in name:
                field_schema["type"] = "email"
            else:
                field_schema["type"] = "text"

        elif isinstance(column.type, Integer):
            if name == "center_id":
                field_schema["type"] = "select"
                field_schema["options"] = _center_options(scope)
                # managers always write into their own center
                if scope and scope.is_manager:
                    field_schema["default"] = scope.center_id
                    field_schema["readonly"] = True

            elif name == "batch_id":
                field_schema["type"] = "select"
                field_schema["options"] = _batch_options(scope)
                field_schema["depends_on"] = "center_id"

            elif name == "faculty_id":
                field_schema["type"] = "select"
                field_schema["options"] = _faculty_options()
            else:
                field_schema["type"] = "number"

        elif isinstance(column.type, Time):
            field_schema["type"] = "time"

        elif "date" in str(column.type).lower():
            field_schema["type"] = "date"

        else:
            field_schema["type"] = "text"

        schema.append(field_schema)

    # roll numbers are generated when left blank
    if model_name == "Student":
        for field in schema:
            if field["name"] == "roll_number":
                field["required"] = False

    return {
        "model": model_name,
        "fields": schema,
    }
