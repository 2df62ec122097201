from io import BytesIO
from flask import Blueprint, request
from academy.models import Student, UserRole
from academy.services import students as student_service
from utils.csv_import import parse_student_csv, parse_student_sheet, parse_name_list
from utils.decorators import role_required, login_required
from utils.errors import ValidationError
from utils.formSchema import generate_schema_from_model
from utils.pagination import pagination_payload
from utils.responses import ok
from utils.validation import request_data, require_fields, parse_id

students_bp = Blueprint("students", __name__)

MANAGERS = (UserRole.ADMIN, UserRole.CENTRE_MANAGER)
CSV_EXTENSIONS = {"csv", "txt"}
SHEET_EXTENSIONS = {"xls", "xlsx"}


def _serialize(student):
    return student.to_dict(include_related=True)


@students_bp.route('/list', methods=['GET'])
@login_required
def list_students(scope):
    page = request.args.get("page", 1, type=int)
    per_page = request.args.get("per_page", 50, type=int)
    search_term = request.args.get("search", type=str)
    batch_id = parse_id(request.args.get("batch_id"), "batch_id", required=False)

    paginated = student_service.list_students(
        scope, batch_id=batch_id, search=search_term, page=page, per_page=per_page
    )
    return ok(pagination_payload(paginated, "students", _serialize))


@students_bp.route('/search', methods=['GET'])
@login_required
def search_students(scope):
    term = (request.args.get("q") or "").strip()
    if not term:
        return ok([])
    return ok([_serialize(s) for s in student_service.search_students(scope, term)])


@students_bp.route('/<int:student_id>', methods=['GET'])
@login_required
def get_student(student_id, scope):
    return ok(_serialize(student_service.get_student(scope, student_id)))


@students_bp.route("/form_schema", methods=["GET"])
@role_required(*MANAGERS)
def form_schema(scope):
    return ok(generate_schema_from_model(Student, "Student", scope=scope))


@students_bp.route('/create', methods=['POST'])
@role_required(*MANAGERS)
def create_student(scope):
    data = request_data()
    require_fields(data, "name")
    student = student_service.create_student(
        scope,
        data.get("name"),
        roll_number=data.get("roll_number"),
        batch_id=parse_id(data.get("batch_id"), "batch_id", required=False),
        center_id=parse_id(data.get("center_id"), "center_id", required=False),
    )
    return ok(_serialize(student), 201)


@students_bp.route('/update/<int:student_id>', methods=['PUT'])
@role_required(*MANAGERS)
def update_student(student_id, scope):
    student = student_service.update_student(scope, student_id, request_data())
    return ok(_serialize(student))


@students_bp.route('/<int:student_id>', methods=['DELETE'])
@role_required(*MANAGERS)
def delete_student(student_id, scope):
    student_service.delete_student(scope, student_id)
    return ok({"message": "Student deleted"})


@students_bp.route('/<int:student_id>/unassign', methods=['POST'])
@role_required(*MANAGERS)
def unassign_student(student_id, scope):
    student = student_service.remove_student_from_batch(scope, student_id)
    return ok(_serialize(student))


@students_bp.route('/bulk', methods=['POST'])
@role_required(*MANAGERS)
def bulk_create(scope):
    data = request_data()
    names = data.get("names")
    if isinstance(names, str):
        names = parse_name_list(names)
    elif not names and data.get("text"):
        names = parse_name_list(data.get("text"))
    if not names:
        raise ValidationError("No student names supplied")

    result = student_service.create_students_bulk(
        scope,
        names,
        batch_id=parse_id(data.get("batch_id"), "batch_id", required=False),
        center_id=parse_id(data.get("center_id"), "center_id", required=False),
    )
    return ok(result, 201 if result["created"] else 200)


def _uploaded_rows():
    upload = request.files.get("file")
    if upload and upload.filename:
        extension = upload.filename.rsplit(".", 1)[-1].lower() if "." in upload.filename else ""
        if extension in SHEET_EXTENSIONS:
            return parse_student_sheet(BytesIO(upload.read()))
        if extension not in CSV_EXTENSIONS:
            raise ValidationError("Only CSV or Excel files are accepted")
        try:
            return parse_student_csv(upload.read().decode("utf-8-sig"))
        except UnicodeDecodeError:
            raise ValidationError("CSV file must be UTF-8 encoded")
    data = request_data()
    return parse_student_csv(data.get("csv") or data.get("text") or "")


@students_bp.route('/bulk_upload', methods=['POST'])
@role_required(*MANAGERS)
def bulk_upload(scope):
    rows = _uploaded_rows()
    if not rows:
        raise ValidationError("No student rows found in CSV")

    data = request_data()
    result = student_service.create_students_from_rows(
        scope,
        rows,
        batch_id=parse_id(data.get("batch_id"), "batch_id", required=False),
        center_id=parse_id(data.get("center_id"), "center_id", required=False),
    )
    return ok(result, 201 if result["created"] else 200)
