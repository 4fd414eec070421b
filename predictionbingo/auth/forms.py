"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Regexp

from predictionbingo.constants import MAX_USERNAME_LENGTH


class SessionForm(FlaskForm):
    """Form for picking a username."""

    username = StringField(
        "Username",
        validators=[
            DataRequired(),
            Length(max=MAX_USERNAME_LENGTH),
            Regexp(r"^[^/]+$", message="Usernames cannot contain '/'."),
            # Firestore reserves these as document ids.
            Regexp(
                r"^(?!\.\.?$)(?!__.*__$)",
                message="That username is reserved. Please pick another.",
            ),
        ],
        filters=[lambda value: value.strip() if value else value],
    )
