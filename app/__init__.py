"""
__init__.py
-----------

Main entry point for initializing the Flask application.

This module is responsible for:
    - Configuring Flask extensions (SQLAlchemy, Migrate, Marshmallow)
    - Attaching the per-app rate limit store
    - Tagging every request with a request id bound into the log context
    - Registering custom error handlers
    - Registering REST API routes
    - Creating the Flask application via the `create_app` factory

Functions:
    - register_extensions(app): Initialize and register Flask extensions.
    - register_request_hooks(app): Request id propagation.
    - register_error_handlers(app): Register custom error handlers for the app.
    - create_app(config_class): Application factory that creates and configures
      the Flask app.
"""

import os
import uuid

import structlog
from flask import Flask, request, g, abort
from flask_migrate import Migrate
from flask_marshmallow import Marshmallow
from flask_cors import CORS
from werkzeug.exceptions import InternalServerError

from app.models.db import db
from app.logger import logger
from app.routes import register_routes
from app.services.rate_limit import init_rate_limiting

# Flask extensions
migrate = Migrate()
ma = Marshmallow()

REQUEST_ID_HEADER = "X-Request-ID"


def register_test_routes(app):
    """
    Register test-only routes that trigger error handlers directly.
    Args:
        app (Flask): The Flask application instance.
    """

    @app.route("/unauthorized")
    def trigger_unauthorized():
        abort(401)

    @app.route("/forbidden")
    def trigger_forbidden():
        abort(403)

    @app.route("/bad")
    def trigger_bad():
        abort(400)

    @app.route("/fail")
    def trigger_fail():
        raise InternalServerError("Test internal error")


def register_extensions(app):
    """
    Initialize and register Flask extensions on the application.

    Args:
        app (Flask): The Flask application instance.
    """
    db.init_app(app)
    migrate.init_app(app, db)
    ma.init_app(app)
    init_rate_limiting(app)
    logger.info("Extensions registered successfully.")


def register_request_hooks(app):
    """
    Assign a request id to every request.

    The id is taken from the incoming ``X-Request-ID`` header when present,
    bound into the structlog context for the duration of the request and
    echoed back on the response.
    """

    @app.before_request
    def bind_request_id():
        # g outlives the request when an app context is already pushed
        for key in ("user", "user_id", "jwt_data"):
            g.pop(key, None)
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=g.request_id)

    @app.after_request
    def echo_request_id(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _error_response(message, status):
    return {
        "error": message,
        "path": request.path,
        "method": request.method,
        "request_id": getattr(g, "request_id", None),
    }, status


def register_error_handlers(app):
    """
    Register custom error handlers for the Flask application.

    Args:
        app (Flask): The Flask application instance.
    """

    @app.errorhandler(400)
    def bad_request(err):
        """Handler for 400 (bad request) errors."""
        logger.warning(
            "Bad request received.",
            error=str(err),
            path=request.path,
            method=request.method,
        )
        return _error_response("Bad request", 400)

    @app.errorhandler(401)
    def unauthorized(err):
        """Handler for 401 (unauthorized) errors."""
        logger.warning(
            "Unauthorized access attempt detected.",
            error=str(err),
            path=request.path,
            method=request.method,
        )
        return _error_response("Unauthorized", 401)

    @app.errorhandler(403)
    def forbidden(err):
        """Handler for 403 (forbidden) errors."""
        logger.warning(
            "Forbidden access attempt detected.",
            error=str(err),
            path=request.path,
            method=request.method,
        )
        return _error_response("Forbidden", 403)

    @app.errorhandler(404)
    def not_found(err):
        """Handler for 404 (resource not found) errors."""
        logger.warning(
            "Resource not found.",
            error=str(err),
            path=request.path,
            method=request.method,
        )
        return _error_response("Resource not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(err):
        logger.warning(
            "Method not allowed.",
            error=str(err),
            path=request.path,
            method=request.method,
        )
        return _error_response("Method not allowed", 405)

    @app.errorhandler(415)
    def unsupported_media_type(err):
        """Handler for 415 (unsupported media type) errors."""
        logger.warning(
            "Unsupported media type.",
            error=str(err),
            path=request.path,
            method=request.method,
        )
        return _error_response("Unsupported media type", 415)

    @app.errorhandler(429)
    def too_many_requests(err):
        logger.warning(
            "Too many requests.",
            error=str(err),
            path=request.path,
            method=request.method,
        )
        return _error_response("Too many requests", 429)

    @app.errorhandler(500)
    def internal_error(err):
        logger.error(
            "Internal server error",
            error=str(err),
            exc_info=True,
            path=request.path,
            method=request.method,
        )
        body, status = _error_response("Internal server error", 500)
        if app.config.get("DEBUG"):
            body["exception"] = str(err)
        return body, status

    logger.info("Error handlers registered successfully.")


def create_app(config_class):
    """
    Factory to create and configure the Flask application.

    Args:
        config_class: The configuration class or import path to use for Flask.

    Returns:
        Flask: The configured and ready-to-use Flask application instance.
    """
    app = Flask(__name__)

    app.config.from_object(config_class)

    env = os.getenv("FLASK_ENV")
    logger.info("Creating app in environment.", environment=env)
    if env in ("development", "staging"):
        CORS(
            app, supports_credentials=True, resources={r"/*": {"origins": "*"}}
        )

    register_extensions(app)
    register_request_hooks(app)
    register_error_handlers(app)
    register_routes(app)
    if app.config.get("TESTING"):
        register_test_routes(app)

    logger.info("App created successfully.")
    return app
