class AcademyError(Exception):
    """Base class for errors that are reported back to the caller as {data, error}."""
    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.default_message())
        self.message = message or self.default_message()

    @classmethod
    def default_message(cls):
        return "Request failed"


class NotAuthenticated(AcademyError):
    status_code = 401

    @classmethod
    def default_message(cls):
        return "Not authenticated"


class NotAuthorized(AcademyError):
    status_code = 403

    @classmethod
    def default_message(cls):
        return "Not authorized"


class NotFound(AcademyError):
    status_code = 404

    @classmethod
    def default_message(cls):
        return "Not found"


class ConflictError(AcademyError):
    status_code = 409

    @classmethod
    def default_message(cls):
        return "Already exists"


class ValidationError(AcademyError):
    status_code = 400

    @classmethod
    def default_message(cls):
        return "Invalid input"


class BackendFailure(AcademyError):
    # opaque passthrough of the database message
    status_code = 500

    @classmethod
    def default_message(cls):
        return "Backend failure"
