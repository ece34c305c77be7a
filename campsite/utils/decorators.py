# campsite/utils/decorators.py
from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from campsite.editor.sections import Actor


def actor_required(fn):
    """
    Require a valid access token and expose the caller as ``g.current_user``.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        claims = get_jwt()
        g.current_user = Actor(
            id=get_jwt_identity(),
            name=claims.get("name", ""),
            role=claims.get("role", "member"),
        )
        return fn(*args, **kwargs)
    return wrapper


def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = get_jwt().get("role")

            if role not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
