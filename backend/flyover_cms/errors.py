import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from flyover_cms.domain.exceptions import CMSError, PersistenceError
from flyover_cms.extensions import jwt

logger = logging.getLogger(__name__)


def error_response(message, status_code, details=None):
    body = {"success": False, "error": message}
    if details:
        body["details"] = details
    response = jsonify(body)
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(CMSError)
    def handle_cms_error(error):
        if isinstance(error, PersistenceError):
            # Traceback was logged where the driver failed
            return error_response(error.message, error.status_code)
        return error_response(error.message, error.status_code, error.details)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return error_response("Internal server error", 500)

    # JWT failures use the same envelope
    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return error_response(reason, 401)

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return error_response(reason, 401)

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return error_response("Token has expired", 401)
