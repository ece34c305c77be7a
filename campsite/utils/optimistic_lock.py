# campsite/utils/optimistic_lock.py
from flask import request
from datetime import timezone
from dateutil.parser import parse

from campsite.editor.errors import StaleWrite, ValidationError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises StaleWrite (409) if the entity has been modified since.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts or entity.updated_at is None:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ValueError, OverflowError):
        raise ValidationError("Invalid If-Unmodified-Since header")

    server_ts = normalize_ts(entity.updated_at)
    # HTTP dates carry whole seconds
    if client_ts.microsecond == 0:
        server_ts = server_ts.replace(microsecond=0)

    if server_ts > client_ts:
        raise StaleWrite("Conflict detected. Section has been modified.")
