# portal_api/common/errors.py
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from werkzeug.exceptions import HTTPException

from portal_api.common.http import fail


class APIError(Exception):
    """Custom API Error class."""
    status_code = 400
    default_code = "BAD_REQUEST"

    def __init__(self, message, code=None, status_code=None, payload=None):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class ValidationError(APIError):
    """Missing or malformed input (e.g. absent employee_id on create)."""
    status_code = 422
    default_code = "VALIDATION_ERROR"


class NotFound(APIError):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(APIError):
    """
    Would-be duplicate of the (test_id, employee_id, assigned_date) triple.

    Raised by manual create / reassignment only. The scheduler's own writes
    drop conflicting inserts silently so reruns stay idempotent.
    """
    status_code = 409
    default_code = "CONFLICT"


class StorageError(APIError):
    """Underlying persistence failure (cannot reach / use the database)."""
    status_code = 503
    default_code = "STORAGE_ERROR"


def is_systemic_error(exc: BaseException) -> bool:
    """
    True for failures that should abort a multi-item operation instead of
    being recorded against a single item: connectivity-class DB errors.
    """
    return isinstance(exc, (StorageError, OperationalError, InterfaceError))


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

    @app.errorhandler(OperationalError)
    def _db_down(e: OperationalError):
        app.logger.error("Database unavailable: %s", e)
        return fail("Database unavailable", status=503, code="STORAGE_ERROR")

    @app.errorhandler(Exception)
    def _500(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)
