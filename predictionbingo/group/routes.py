"""Routes for the group blueprint."""

from datetime import timezone

from flask import current_app

from predictionbingo.auth.decorators import login_required
from predictionbingo.auth.session import current_username, record_recent_group
from predictionbingo.errors import AlreadyMember, ValidationError
from predictionbingo.services import GroupService
from predictionbingo.store import get_store
from predictionbingo.utils import api_response, first_form_error

from . import bp
from .forms import GroupForm, PhaseForm


@bp.route("/", methods=["POST"])
@login_required
def create_group():
    """Create a new group with the caller as organizer."""
    form = GroupForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    deadline = form.submission_deadline.data
    if deadline is not None:
        deadline = deadline.replace(tzinfo=timezone.utc)

    store = get_store()
    group = GroupService.create_group(
        store, form.name.data, current_username(), submission_deadline=deadline
    )
    dashboard = GroupService.get_dashboard(store, group["id"], current_username())
    record_recent_group(dashboard["group"])
    return api_response(
        dashboard, message="Group created successfully.", status_code=201
    )


@bp.route("/<string:group_id>", methods=["GET"])
@login_required
def view_group(group_id):
    """Display a single group's dashboard."""
    dashboard = GroupService.get_dashboard(get_store(), group_id, current_username())
    dashboard["recent_groups"] = record_recent_group(dashboard["group"])
    return api_response(dashboard)


@bp.route("/<string:group_id>/join", methods=["POST"])
@login_required
def join_group(group_id):
    """Join a group through its invite link."""
    store = get_store()
    message = "Joined group."
    try:
        GroupService.join(store, group_id, current_username())
    except AlreadyMember as e:
        # Following an invite link twice just lands on the group.
        message = e.message
    dashboard = GroupService.get_dashboard(store, group_id, current_username())
    record_recent_group(dashboard["group"])
    return api_response(dashboard, message=message)


@bp.route("/<string:group_id>/lock", methods=["POST"])
@login_required
def toggle_lock(group_id):
    """Lock or unlock a group against new members."""
    group = GroupService.toggle_lock(get_store(), group_id, current_username())
    state = "locked" if group.get("is_locked") else "unlocked"
    return api_response({"group": group}, message=f"Group {state}.")


@bp.route("/<string:group_id>/phase", methods=["POST"])
@login_required
def advance_phase(group_id):
    """Move a group to the next phase."""
    form = PhaseForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    group = GroupService.advance_phase(
        get_store(), group_id, form.status.data, acting_username=current_username()
    )
    current_app.logger.info(f"Group {group_id} is now {group.get('status')}.")
    return api_response({"group": group}, message="Group phase updated.")
