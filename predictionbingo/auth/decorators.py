"""Decorators for the auth blueprint."""

from functools import wraps

from flask import session

from predictionbingo.utils import api_response


def login_required(f):
    """Reject the request unless a username is in the session.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get("username"):
            return api_response(
                message="Please choose a username first.",
                status_code=401,
                success=False,
            )
        return f(*args, **kwargs)

    return decorated_function
