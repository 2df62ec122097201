from datetime import date
from flask import Blueprint, request
from academy.models import UserRole
from academy.services import reports as report_service
from utils.decorators import role_required, login_required
from utils.errors import ValidationError
from utils.responses import ok
from utils.schedule import parse_date, resolve_day_type
from utils.validation import parse_id

reports_bp = Blueprint('reports', __name__)


def _report_day():
    return parse_date(request.args.get("date"), default=date.today())


@reports_bp.route('/batches', methods=['GET'])
@login_required
def batches_report(scope):
    day = _report_day()
    day_type = resolve_day_type(day)
    return ok({
        "date": day.isoformat(),
        "day_type": day_type.value if day_type else None,
        "batches": report_service.all_batches_day_report(scope, day),
    })


@reports_bp.route('/center/<int:center_id>', methods=['GET'])
@role_required(UserRole.ADMIN, UserRole.CENTRE_MANAGER)
def center_report(center_id, scope):
    return ok(report_service.center_day_report(scope, center_id, _report_day()))


@reports_bp.route('/faculty', methods=['GET'])
@role_required(UserRole.ADMIN, UserRole.CENTRE_MANAGER)
def faculty_report(scope):
    day = _report_day()
    return ok({
        "date": day.isoformat(),
        "faculty": report_service.faculty_day_report(scope, day),
    })


@reports_bp.route('/students', methods=['GET'])
@login_required
def students_report(scope):
    batch_id = parse_id(request.args.get("batch_id"), "batch_id", required=False)
    start = parse_date(request.args.get("start_date"), field="start_date")
    end = parse_date(request.args.get("end_date"), field="end_date")
    if start and end and start > end:
        raise ValidationError("start_date must be on or before end_date")

    return ok(report_service.student_range_report(scope, batch_id=batch_id, start=start, end=end))
