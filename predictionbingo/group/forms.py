"""Forms for the group blueprint."""

from flask_wtf import FlaskForm
from wtforms import DateTimeLocalField, SelectField, StringField
from wtforms.validators import DataRequired, Length, Optional

from predictionbingo.constants import MAX_GROUP_NAME_LENGTH
from predictionbingo.models import GroupStatus


class GroupForm(FlaskForm):
    """Form for creating a new group."""

    name = StringField(
        "Group Name", validators=[DataRequired(), Length(max=MAX_GROUP_NAME_LENGTH)]
    )
    submission_deadline = DateTimeLocalField(
        "Submission Deadline", validators=[Optional()]
    )


class PhaseForm(FlaskForm):
    """Form for moving a group to another phase."""

    status = SelectField(
        "Status",
        choices=[(status.value, status.value.title()) for status in GroupStatus],
        validators=[DataRequired()],
    )
