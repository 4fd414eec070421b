"""Error handlers that turn exceptions into API responses."""

from flask import Blueprint, current_app
from flask_wtf.csrf import CSRFError

from .errors import AppError, NotFoundError, StoreError, ValidationError
from .utils import api_response

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return api_response(
        message=error.message, status_code=error.status_code, success=False
    )


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles missing groups and predictions."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return api_response(
        message=error.message, status_code=error.status_code, success=False
    )


@error_handlers_bp.app_errorhandler(StoreError)
def handle_store_error(error):
    """Handles record store failures without exposing their details."""
    current_app.logger.error(f"Store Error: {error.message} ({error.__cause__})")
    return api_response(
        message="A database error occurred. Please try again later.",
        status_code=error.status_code,
        success=False,
    )


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles policy errors such as locked groups or closed phases."""
    current_app.logger.warning(f"{type(error).__name__}: {error.message}")
    return api_response(
        message=error.message, status_code=error.status_code, success=False
    )


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return api_response(message="Page Not Found", status_code=404, success=False)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with an unsupported method."""
    return api_response(message="Method Not Allowed", status_code=405, success=False)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return api_response(
        message="An unexpected error occurred.", status_code=500, success=False
    )


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """Handles CSRF errors, which usually mean an expired session."""
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return api_response(
        message="Your session may have expired. Please try your action again.",
        status_code=400,
        success=False,
    )
