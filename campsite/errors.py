# campsite/errors.py
from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from campsite.domain.invariants.exceptions import InvariantViolation
from campsite.editor.errors import EditorError, StoreError


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "error": "InvariantViolation",
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(EditorError)
    def handle_editor_error(error):
        if error.status_code >= 500:
            current_app.logger.warning(f"{type(error).__name__}: {error.message}")
        response = jsonify({
            "error": type(error).__name__,
            "message": error.message
        })
        response.status_code = error.status_code
        return response

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        current_app.logger.error(f"Store failure: {error}")
        response = jsonify({
            "error": "StoreError",
            "message": "The storage backend is unavailable."
        })
        response.status_code = 502
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name,
            "message": error.description
        })
        response.status_code = error.code
        return response
