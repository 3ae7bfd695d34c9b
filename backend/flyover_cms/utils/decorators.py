from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity

from flyover_cms.domain.exceptions import Forbidden


def current_role():
    return (get_jwt().get("role") or "").upper()


def current_actor_id():
    identity = get_jwt_identity()
    return str(identity) if identity is not None else None


def check_roles(allowed_roles):
    if current_role() not in allowed_roles:
        raise Forbidden("Insufficient permissions")


def roles_required(*allowed_roles):
    """Use under @jwt_required(): the token's ``role`` claim must be one of ``allowed_roles``."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            check_roles(allowed_roles)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
