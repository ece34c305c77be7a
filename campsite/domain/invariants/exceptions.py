# campsite/domain/invariants/exceptions.py
class InvariantViolation(Exception):
    """Raised when persisted content would break a structural rule."""
