from flask import Flask
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from .config import Config
from academy.routes import register_routes
from academy.models import TokenBlocklist
from academy.extensions import db, jwt, limiter, migrate
from utils.errors import AcademyError, BackendFailure
from utils.responses import fail


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    jwt.init_app(app)
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)
    limiter.init_app(app)
    register_routes(app)
    migrate.init_app(app, db)
    register_jwt_handlers()
    register_error_handlers(app)

    with app.app_context():
        db.create_all()

    return app


def register_jwt_handlers():
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        jti = jwt_payload["jti"]
        token = db.session.query(TokenBlocklist).filter_by(jti=jti).first()
        return token is not None

    @jwt.unauthorized_loader
    def missing_token(reason):
        return fail("Not authenticated", 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return fail("Not authenticated", 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return fail("Session expired", 401)

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return fail("Session revoked", 401)


def register_error_handlers(app):
    @app.errorhandler(AcademyError)
    def handle_academy_error(error):
        db.session.rollback()
        if isinstance(error, BackendFailure):
            app.logger.error("Backend failure: %s", error.message)
        return fail(error.message, error.status_code)

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(error):
        app.logger.exception("Database error")
        return handle_academy_error(BackendFailure(str(getattr(error, "orig", None) or error)))

    @app.errorhandler(404)
    def handle_not_found(error):
        return fail("Not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return fail("Method not allowed", 405)

    @app.errorhandler(413)
    def handle_too_large(error):
        return fail("Upload too large", 413)
