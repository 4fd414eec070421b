"""Utility functions for the application."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from flask import jsonify
from flask.json.provider import DefaultJSONProvider
from google.cloud.firestore_v1.transforms import Sentinel

from .models import APIResponse

if TYPE_CHECKING:
    from flask import Response
    from flask_wtf import FlaskForm


class FirestoreJSONProvider(DefaultJSONProvider):
    """JSON provider that understands Firestore values."""

    @staticmethod
    def default(o: Any) -> Any:
        """Serialize timestamps as ISO strings and pending server timestamps as null."""
        if isinstance(o, Sentinel):
            return None
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def api_response(
    data: dict[str, Any] | None = None,
    message: str = "",
    status_code: int = 200,
    success: bool = True,
) -> tuple[Response, int]:
    """Wrap a payload in the standard API envelope."""
    payload: APIResponse = {"success": success, "message": message, "data": data}
    return jsonify(payload), status_code


def first_form_error(form: FlaskForm) -> str:
    """Return the first validation message of a form."""
    for field_name, errors in form.errors.items():
        if not errors:
            continue
        field = getattr(form, field_name, None)
        label = field.label.text if field is not None else field_name
        return f"{label}: {errors[0]}"
    return "Invalid request."
