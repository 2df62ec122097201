from datetime import date
from flask import Blueprint, request
from academy.models import Batch, ScheduleDays, UserRole
from academy.services import batches as batch_service
from academy.services import reports as report_service
from academy.services import students as student_service
from utils.decorators import role_required, login_required
from utils.formSchema import generate_schema_from_model
from utils.responses import ok
from utils.schedule import parse_date, day_name
from utils.validation import request_data, parse_enum, parse_id

batches_bp = Blueprint('batches', __name__)

MANAGERS = (UserRole.ADMIN, UserRole.CENTRE_MANAGER)


@batches_bp.route('/list', methods=['GET'])
@login_required
def list_batches(scope):
    center_id = parse_id(request.args.get("center_id"), "center_id", required=False)
    days = request.args.get("schedule_days")
    schedule_days = parse_enum(ScheduleDays, days, "schedule_days") if days else None
    batches = batch_service.list_batches(scope, center_id=center_id, schedule_days=schedule_days)
    return ok(batch_service.with_student_counts(batches))


@batches_bp.route('/today', methods=['GET'])
@role_required(UserRole.FACULTY)
def faculty_today(scope):
    day = parse_date(request.args.get("date"), default=date.today())
    data = batch_service.faculty_batches_for_day(scope, day)
    data.update({"date": day.isoformat(), "day_name": day_name(day)})
    return ok(data)


@batches_bp.route('/faculty', methods=['GET'])
@role_required(*MANAGERS)
def faculty_options(scope):
    return ok([
        {"id": u.id, "full_name": u.full_name, "email": u.email}
        for u in batch_service.list_faculty()
    ])


@batches_bp.route("/form_schema", methods=["GET"])
@role_required(*MANAGERS)
def form_schema(scope):
    return ok(generate_schema_from_model(Batch, "Batch", scope=scope))


@batches_bp.route('/create', methods=['POST'])
@role_required(*MANAGERS)
def create_batch(scope):
    batch = batch_service.create_batch(scope, request_data())
    return ok(batch.to_dict(include_related=True), 201)


@batches_bp.route('/update/<int:batch_id>', methods=['PUT'])
@role_required(*MANAGERS)
def update_batch(batch_id, scope):
    batch = batch_service.update_batch(scope, batch_id, request_data())
    return ok(batch.to_dict(include_related=True))


@batches_bp.route('/<int:batch_id>', methods=['DELETE'])
@role_required(*MANAGERS)
def delete_batch(batch_id, scope):
    batch_service.delete_batch(scope, batch_id)
    return ok({"message": "Batch deleted"})


@batches_bp.route('/<int:batch_id>', methods=['GET'])
@login_required
def batch_details(batch_id, scope):
    day = parse_date(request.args.get("date"), default=date.today())
    return ok(report_service.batch_details(scope, batch_id, day))


@batches_bp.route('/<int:batch_id>/assign', methods=['POST'])
@role_required(*MANAGERS)
def assign_students(batch_id, scope):
    data = request.get_json(silent=True) or {}
    student_ids = [parse_id(sid, "student_id") for sid in data.get("student_ids") or []]
    assigned = student_service.assign_students_to_batch(scope, student_ids, batch_id)
    return ok({"assigned": assigned})
