from datetime import date
from flask import Blueprint, request
from academy.services import attendance as attendance_service
from utils.decorators import login_required
from utils.responses import ok
from utils.schedule import parse_date
from utils.validation import parse_id

attendance_bp = Blueprint('attendance', __name__)


@attendance_bp.route('/batch/<int:batch_id>/students', methods=['GET'])
@login_required
def batch_students(batch_id, scope):
    students = attendance_service.get_batch_students(scope, batch_id)
    return ok([s.to_dict() for s in students])


@attendance_bp.route('/batch/<int:batch_id>', methods=['GET'])
@login_required
def attendance_for_date(batch_id, scope):
    day = parse_date(request.args.get("date"), default=date.today())
    records = attendance_service.get_attendance_for_date(scope, batch_id, day)
    return ok([r.to_dict(include_student=True) for r in records])


@attendance_bp.route('/mark', methods=['POST'])
@login_required
def mark_attendance(scope):
    data = request.get_json(silent=True) or {}
    batch_id = parse_id(data.get("batch_id"), "batch_id")
    day = parse_date(data.get("date"), default=date.today())

    count = attendance_service.mark_attendance(scope, batch_id, day, data.get("records"))
    return ok({
        "message": "Attendance saved",
        "batch_id": batch_id,
        "date": day.isoformat(),
        "records": count,
    })
