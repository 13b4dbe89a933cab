"""
Error taxonomy shared by services and routes.

Services raise these; ``register_error_handlers`` turns them into the JSON
error envelope ``{"success": false, "error": "..."}`` with the matching
HTTP status.
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"success": False, "error": self.message}


class ValidationError(ApiError):
    status_code = 400
    default_message = "Make sure you fill all fields"


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Invalid email or password"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Email already exists"


class InternalError(ApiError):
    status_code = 500


class HashingError(InternalError):
    default_message = "Failed to hash password"


class AssetStoreError(InternalError):
    default_message = "Failed to save image"


class AssetNotFoundError(NotFoundError):
    default_message = "Image not found"


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            # Detail stays in the log, the client gets the generic message
            logger.error(f"[API] {type(err).__name__}: {err.message}", exc_info=err)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"success": False, "error": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        logger.exception(f"[API] Unhandled error: {err}")
        return jsonify({"success": False, "error": InternalError.default_message}), 500
