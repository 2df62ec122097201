from flask import Blueprint, current_app
from sqlalchemy.exc import SQLAlchemyError
from utils.responses import ok, fail

base_bp = Blueprint("base", __name__)

@base_bp.route("/")
def home():
    return ok({"message": "Academy attendance API"})

@base_bp.route("/health")
def health():
    from academy.models import Center
    try:
        count = Center.query.count()
        return ok({"status": "success", "centers": count})
    except SQLAlchemyError as e:
        current_app.logger.error("Health check failed: %s", e)
        return fail(str(e), 500)
