from flask import request, jsonify, make_response, current_app
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from datetime import datetime

def log_rate_limit_violation(request_limit):
    # models import lazily; extensions imports this module before models exist
    from academy.models import AuditLog
    from academy.extensions import db

    try:
        verify_jwt_in_request(optional=True)
        user_id = get_jwt_identity()
    except (JWTExtendedException, PyJWTError):
        user_id = None

    current_app.logger.warning("Rate limit exceeded: %s %s (%s)", request.method, request.path, request_limit.limit)

    log = AuditLog(
        user_id=int(user_id) if user_id else None,
        action=f"RATE_LIMIT_EXCEEDED: {request.method} {request.path}",
        ip_address=request.remote_addr,
        timestamp=datetime.utcnow(),
    )
    db.session.add(log)
    db.session.commit()

    return make_response(jsonify({
        "data": None,
        "error": "Rate limit exceeded. Please slow down."
    }), 429)
