# campsite/utils/transaction.py
from contextlib import contextmanager
from campsite.extensions import db


@contextmanager
def transactional():
    """Commit on success, roll back and re-raise on any failure."""
    try:
        yield
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
