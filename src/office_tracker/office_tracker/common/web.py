"""Flask helpers shared by the JSON controllers."""

from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import g, jsonify, request, session

from ..core.exceptions import AuthenticationError, ValidationError


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def login_required(container):
    """Rebuild the caller's SessionContext into ``g.context`` or reject with 401."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                raise AuthenticationError("Please sign in to continue")
            g.context = container.auth_service.load_context(int(session["user_id"]))
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def int_arg(name: str, value: Any = None, *, required: bool = False) -> Optional[int]:
    if value is None:
        value = request.args.get(name)
    if value is None or value == "":
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
