from flask import Blueprint
from academy.models import Center, UserRole
from academy.services import centers as center_service
from utils.decorators import role_required, login_required
from utils.formSchema import generate_schema_from_model
from utils.responses import ok
from utils.validation import request_data

centers_bp = Blueprint('centers', __name__)


@centers_bp.route('/list', methods=['GET'])
@login_required
def list_centers(scope):
    centers = center_service.list_centers(scope)
    return ok([c.to_dict() for c in centers])


@centers_bp.route('/summary', methods=['GET'])
@role_required(UserRole.ADMIN)
def centers_summary(scope):
    centers = center_service.list_centers(scope)
    return ok(center_service.with_stats(centers))


@centers_bp.route('/<int:center_id>', methods=['GET'])
@role_required(UserRole.ADMIN, UserRole.CENTRE_MANAGER)
def center_details(center_id, scope):
    center = center_service.get_center(scope, center_id)
    return ok(center_service.with_stats([center])[0])


@centers_bp.route("/form_schema", methods=["GET"])
@login_required
def form_schema(scope):
    return ok(generate_schema_from_model(Center, "Center", scope=scope))


@centers_bp.route('/create', methods=['POST'])
@role_required(UserRole.ADMIN)
def create_center(scope):
    data = request_data()
    center = center_service.create_center(data.get("name"))
    return ok(center.to_dict(), 201)


@centers_bp.route('/update/<int:center_id>', methods=['PUT'])
@role_required(UserRole.ADMIN)
def update_center(center_id, scope):
    data = request_data()
    center = center_service.update_center(scope, center_id, data.get("name"))
    return ok(center.to_dict())


@centers_bp.route('/<int:center_id>', methods=['DELETE'])
@role_required(UserRole.ADMIN)
def delete_center(center_id, scope):
    center_service.delete_center(scope, center_id)
    return ok({"message": "Center deleted"})
