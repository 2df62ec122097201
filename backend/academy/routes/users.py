from flask import Blueprint
from academy.models import User, UserRole
from academy.services import users as user_service
from utils.decorators import role_required
from utils.formSchema import generate_schema_from_model
from utils.responses import ok
from utils.validation import request_data, parse_enum


users_bp = Blueprint('users', __name__)


@users_bp.route('/list', methods=['GET'])
@role_required(UserRole.ADMIN)
def list_users(scope):
    return ok([u.to_dict(include_center=True) for u in user_service.list_users()])


@users_bp.route('/role/<role>', methods=['GET'])
@role_required(UserRole.ADMIN, UserRole.CENTRE_MANAGER)
def list_users_by_role(role, scope):
    role = parse_enum(UserRole, role, "role")
    return ok([u.to_dict(include_center=True) for u in user_service.list_users_by_role(scope, role)])


@users_bp.route('/stats', methods=['GET'])
@role_required(UserRole.ADMIN)
def users_stats(scope):
    return ok(user_service.user_stats())


@users_bp.route("/form_schema", methods=["GET"])
@role_required(UserRole.ADMIN)
def form_schema(scope):
    return ok(generate_schema_from_model(User, "User", scope=scope))


@users_bp.route('/update/<int:user_id>', methods=['PUT'])
@role_required(UserRole.ADMIN)
def update_user(user_id, scope):
    data = request_data()
    updates = {key: data.get(key) for key in ("full_name", "role", "center_id") if key in data}
    user = user_service.update_user(scope, user_id, updates)
    return ok(user.to_dict(include_center=True))


@users_bp.route('/<int:user_id>', methods=['DELETE'])
@role_required(UserRole.ADMIN)
def delete_user(user_id, scope):
    user_service.delete_user(scope, user_id)
    return ok({"message": "User removed"})
