"""Application factory for the messaging app."""

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException, Forbidden, Unauthorized, \
    BadRequest, MethodNotAllowed, InternalServerError, NotFound

from .auth import Auth
from .routes import api
from .services import datastore, kvstore
from .services.throttle import LoginThrottle


def create_web_app() -> Flask:
    """Initialize and configure the messaging application."""
    app = Flask('murmur')
    app.config.from_pyfile('config.py')

    datastore.init_app(app)
    kvstore.init_app(app)
    LoginThrottle.init_app(app)
    Auth(app)   # Handles sessions and authn.

    app.register_blueprint(api.blueprint)
    register_error_handlers(app)

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(Forbidden)(jsonify_exception)
    app.errorhandler(Unauthorized)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)


def jsonify_exception(error: HTTPException) -> Response:
    """Render exceptions as JSON."""
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response
