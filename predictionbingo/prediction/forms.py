"""Forms for the prediction blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, TextAreaField
from wtforms.validators import DataRequired, Length

from predictionbingo.constants import MAX_PREDICTION_LENGTH
from predictionbingo.models import PredictionStatus


class ReviewForm(FlaskForm):
    """Form for approving or rejecting a prediction."""

    status = SelectField(
        "Status",
        choices=[
            (PredictionStatus.APPROVED.value, "Approve"),
            (PredictionStatus.REJECTED.value, "Reject"),
        ],
        validators=[DataRequired()],
    )


class CommentForm(FlaskForm):
    """Form for commenting on a prediction during review."""

    content = TextAreaField(
        "Comment", validators=[DataRequired(), Length(max=MAX_PREDICTION_LENGTH)]
    )
