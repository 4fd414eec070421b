"""Routes for the auth blueprint."""

from firebase_admin import firestore
from flask import current_app
from flask_wtf.csrf import generate_csrf

from predictionbingo.constants import USERS_COLLECTION
from predictionbingo.errors import ValidationError
from predictionbingo.store import get_store
from predictionbingo.utils import api_response, first_form_error

from . import bp
from .forms import SessionForm
from .session import current_username, get_recent_groups, sign_in, sign_out


@bp.route("/csrf", methods=["GET"])
def csrf_token():
    """Hand out a CSRF token for subsequent form posts."""
    return api_response({"csrf_token": generate_csrf()})


@bp.route("/session", methods=["GET"])
def get_session():
    """Return the signed-in username and the recent groups."""
    return api_response(
        {"username": current_username(), "recent_groups": get_recent_groups()}
    )


@bp.route("/session", methods=["POST"])
def create_session():
    """Sign in with a self-asserted username, creating the user if needed."""
    form = SessionForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    username = form.username.data.strip()
    if not username:
        raise ValidationError("Please enter a username.")

    get_store().insert(
        USERS_COLLECTION,
        [
            {
                "id": username,
                "username": username,
                "created_at": firestore.SERVER_TIMESTAMP,
            }
        ],
    )
    sign_in(username)
    current_app.logger.info(f"{username} signed in.")
    return api_response(
        {"username": username, "recent_groups": get_recent_groups()},
        message="Signed in.",
    )


@bp.route("/session", methods=["DELETE"])
def delete_session():
    """Sign out."""
    sign_out()
    return api_response(message="Signed out.")
