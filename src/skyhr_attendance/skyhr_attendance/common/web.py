from __future__ import annotations

from functools import wraps

from flask import request, session

from ..core.exceptions import AuthenticationError, ValidationError
from ..members.model import Identity


def current_identity() -> Identity:
    """Caller identity placed in the session by the auth provider."""
    user_id = session.get("user_id")
    organization_id = session.get("active_organization_id")
    if not user_id or not organization_id:
        raise AuthenticationError("Unauthorized")
    return Identity(user_id=str(user_id), organization_id=str(organization_id))


def login_required(view):
    """Resolve the caller before the view runs and pass it as ``identity``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(*args, identity=current_identity(), **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def form_or_json(name: str):
    """Field from a form/multipart body, falling back to a JSON body."""
    if name in request.form:
        return request.form.get(name)
    return json_body().get(name)
