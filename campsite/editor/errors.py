# campsite/editor/errors.py
from typing import Optional


class StoreError(Exception):
    """
    Raised by store implementations when a remote call fails as a unit
    (database, blob storage). The editor translates it into a
    user-facing LoadError or MutationError.
    """


class EditorError(Exception):
    status_code = 400
    default_message = "The request could not be processed."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class LoadError(EditorError):
    """Listing blocks, sections or history failed. Persistent until reload."""

    status_code = 503
    default_message = "Content could not be loaded."


class MutationError(EditorError):
    """A create/update/delete/upload failed. Transient."""

    status_code = 502
    default_message = "The change could not be saved."


class CommitInProgress(EditorError):
    status_code = 409
    default_message = "A commit is already running for this section."


class StaleWrite(EditorError):
    status_code = 409
    default_message = "Conflict detected. Section has been modified."


class BlockNotFound(EditorError):
    status_code = 404
    default_message = "Block not found."


class SectionNotFound(EditorError):
    status_code = 404
    default_message = "Section not found."


class PermissionDenied(EditorError):
    status_code = 403
    default_message = "Insufficient permissions."


class ValidationError(EditorError):
    status_code = 400
    default_message = "Invalid input."
