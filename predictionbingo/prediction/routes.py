"""Routes for the prediction blueprint."""

from flask import request

from predictionbingo.auth.decorators import login_required
from predictionbingo.auth.session import current_username
from predictionbingo.errors import ValidationError
from predictionbingo.services import PredictionService
from predictionbingo.store import get_store
from predictionbingo.utils import api_response, first_form_error

from . import bp
from .forms import CommentForm, ReviewForm


@bp.route("/<string:group_id>/predictions", methods=["GET"])
@login_required
def list_predictions(group_id):
    """List every prediction in the group."""
    store = get_store()
    username = current_username()
    predictions = PredictionService.list_for_group(store, group_id, username)
    return api_response(
        {
            "predictions": predictions,
            "user_prediction_count": sum(p["is_current_user"] for p in predictions),
        }
    )


@bp.route("/<string:group_id>/predictions", methods=["POST"])
@login_required
def submit_predictions(group_id):
    """Replace the caller's predictions.

    Expects a JSON body of the form ``{"predictions": ["...", ...]}``.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or "predictions" not in payload:
        raise ValidationError("Expected a JSON body with a 'predictions' list.")

    result = PredictionService.submit(
        get_store(), group_id, current_username(), payload["predictions"]
    )
    message = "Predictions saved."
    if result["auto_advanced"]:
        message = "Everyone has submitted. Let's play bingo!"
    return api_response(result, message=message)


@bp.route("/<string:group_id>/predictions/review", methods=["GET"])
@login_required
def review_predictions(group_id):
    """List predictions with their comments during review."""
    predictions = PredictionService.list_for_review(
        get_store(), group_id, current_username()
    )
    return api_response({"predictions": predictions})


@bp.route(
    "/<string:group_id>/predictions/<string:prediction_id>/review",
    methods=["POST"],
)
@login_required
def review_prediction(group_id, prediction_id):
    """Approve or reject a prediction."""
    form = ReviewForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    prediction = PredictionService.review(
        get_store(), group_id, prediction_id, form.status.data, current_username()
    )
    return api_response({"prediction": prediction}, message="Prediction reviewed.")


@bp.route(
    "/<string:group_id>/predictions/<string:prediction_id>/comments",
    methods=["POST"],
)
@login_required
def add_comment(group_id, prediction_id):
    """Comment on a prediction."""
    form = CommentForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    comment = PredictionService.add_comment(
        get_store(), group_id, prediction_id, current_username(), form.content.data
    )
    return api_response({"comment": comment}, message="Comment added.", status_code=201)
