# campsite/services/base.py
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from campsite.editor.errors import StoreError
from campsite.utils.transaction import transactional


@contextmanager
def store_call(action):
    """
    One store operation as a unit of work. Database failures are rolled back
    and surface as StoreError; domain errors pass through unchanged.
    """
    try:
        with transactional():
            yield
    except SQLAlchemyError as exc:
        current_app.logger.error(f"{action} failed: {exc}")
        raise StoreError(f"{action} failed") from exc
