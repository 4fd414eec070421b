"""Routes for the bingo blueprint."""

from flask import current_app

from predictionbingo.auth.decorators import login_required
from predictionbingo.auth.session import current_username
from predictionbingo.services import BingoService, CompletionService
from predictionbingo.store import get_store
from predictionbingo.utils import api_response

from . import bp


@bp.route("/<string:group_id>/card", methods=["GET"])
@login_required
def view_card(group_id):
    """Generate the caller's bingo card."""
    seed = group_id if current_app.config.get("BINGO_SEED_LAYOUT") else None
    card = BingoService.get_card(get_store(), group_id, current_username(), seed=seed)
    return api_response(card)


@bp.route(
    "/<string:group_id>/card/<string:prediction_id>/toggle", methods=["POST"]
)
@login_required
def toggle_cell(group_id, prediction_id):
    """Mark a prediction as come true, or clear the mark."""
    result = CompletionService.toggle(
        get_store(), group_id, prediction_id, current_username()
    )
    return api_response(result)
