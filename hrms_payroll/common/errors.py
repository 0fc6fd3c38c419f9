# hrms_payroll/common/errors.py
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import IntegrityError

from hrms_payroll.common.http import fail


class APIError(Exception):
    """Base error carrying an HTTP status class and a machine-readable code."""
    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message, code=None, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class ValidationError(APIError):
    """Malformed or missing input (period identifier, employee id, patch values)."""
    status_code = 422
    code = "VALIDATION_ERROR"


class NotFoundError(APIError):
    """Employee, post or payroll record absent."""
    status_code = 404
    code = "NOT_FOUND"


class ConfigurationError(APIError):
    """Post is missing mandatory salary configuration."""
    status_code = 422
    code = "CONFIGURATION_ERROR"


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(e: APIError):
        return fail(e.message, status=e.status_code, code=e.code, detail=e.payload)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(IntegrityError)
    def _dup(e: IntegrityError):
        return fail("Duplicate or FK constraint failed", status=409, code="CONSTRAINT_ERROR")

    @app.errorhandler(Exception)
    def _500(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)
