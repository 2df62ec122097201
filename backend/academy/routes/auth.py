from flask import Blueprint, request, current_app, make_response
from flask_jwt_extended import (
    create_access_token, create_refresh_token, jwt_required,
    get_jwt_identity, get_jwt
)
from academy.models import User, UserRole, TokenBlocklist
from academy.extensions import db, limiter
from utils.audit import log_event
from utils.decorators import login_required
from utils.responses import ok, fail
from datetime import datetime
import re

auth_bp = Blueprint('auth', __name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

# landing page the frontend should open for each role
HOME_ROUTES = {
    UserRole.ADMIN: "/admin",
    UserRole.CENTRE_MANAGER: "/centre-manager/batches",
    UserRole.FACULTY: "/faculty",
}


def _issue_tokens(response, user):
    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role.value, "center_id": user.center_id}
    )
    refresh_token = create_refresh_token(identity=str(user.id))

    secure_flag = current_app.config["JWT_COOKIE_SECURE"]
    same_site = current_app.config["JWT_COOKIE_SAMESITE"]
    access_age = int(current_app.config["JWT_ACCESS_TOKEN_EXPIRES"].total_seconds())
    refresh_age = int(current_app.config["JWT_REFRESH_TOKEN_EXPIRES"].total_seconds())

    response.set_cookie(
        "access_token_cookie",
        access_token,
        max_age=access_age,
        httponly=True,
        secure=secure_flag,
        samesite=same_site,
        path="/"
    )
    response.set_cookie(
        "refresh_token_cookie",
        refresh_token,
        max_age=refresh_age,
        httponly=True,
        secure=secure_flag,
        samesite=same_site,
        path="/auth/refresh"
    )


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
def login():
    data = request.get_json(silent=True) or request.form
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    ip = request.remote_addr

    if not email or not password:
        return fail("Email and password are required", 400)

    if not EMAIL_PATTERN.match(email):
        return fail("Invalid email format", 400)

    user = User.query.filter_by(email=email).first()

    if user and user.check_password(password):
        response = make_response(ok({
            "message": "Login successful",
            "user": user.to_dict(include_center=True),
            "home": HOME_ROUTES.get(user.role, "/login"),
        })[0])
        _issue_tokens(response, user)

        log_event("LOGIN_SUCCESS", user_id=user.id, ip=ip, description=f"{email} logged in")
        return response

    log_event("LOGIN_FAILED", ip=ip, description=f"Failed login attempt for {email}")
    return fail("Invalid email or password", 401)


@auth_bp.route('/me', methods=['GET'])
@login_required
def get_current_user(scope):
    user = db.session.get(User, scope.user_id)
    return ok(dict(user.to_dict(include_center=True), home=HOME_ROUTES.get(user.role, "/login")))


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True, locations=["cookies"])
def refresh_access_token():
    user = db.session.get(User, int(get_jwt_identity()))
    if not user:
        return fail("User not found", 401)

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role.value, "center_id": user.center_id}
    )

    response = make_response(ok({"message": "Token refreshed"})[0])
    response.set_cookie(
        "access_token_cookie",
        access_token,
        max_age=int(current_app.config["JWT_ACCESS_TOKEN_EXPIRES"].total_seconds()),
        httponly=True,
        secure=current_app.config["JWT_COOKIE_SECURE"],
        samesite=current_app.config["JWT_COOKIE_SAMESITE"],
        path="/"
    )

    log_event("REFRESH_TOKEN", user_id=user.id, ip=request.remote_addr)
    return response


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    claims = get_jwt()
    user_id = int(get_jwt_identity())
    expires = datetime.fromtimestamp(claims["exp"])

    token_block = TokenBlocklist(jti=claims["jti"], token_type=claims.get("type", "access"), user_id=user_id, expires_at=expires)
    db.session.add(token_block)
    db.session.commit()

    response = make_response(ok({"message": "Successfully logged out"})[0])
    response.delete_cookie("access_token_cookie", path="/")
    response.delete_cookie("refresh_token_cookie", path="/auth/refresh")

    log_event("LOGOUT", user_id=user_id, ip=request.remote_addr)
    return response
