"""Provides the JSON API."""

import logging

from flask import Blueprint, Response, jsonify, make_response, request
from werkzeug.datastructures import MultiDict

from ..auth.decorators import anonymous_only, authenticated
from ..auth.sessions import SessionStore
from ..controllers import authentication, messages
from ..services.throttle import LoginThrottle

logger = logging.getLogger(__name__)

blueprint = Blueprint('api', __name__, url_prefix='')


def _form_data() -> MultiDict:
    """Get the request payload, whether it was sent as JSON or as a form."""
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return MultiDict()
        # Values are kept whole; a list is not treated as repeated values.
        return MultiDict(list(payload.items()))
    return request.form


def _respond(data: object, code: int, headers: dict) -> Response:
    return make_response(jsonify(data), code, headers)


@blueprint.route('/auth/me', methods=['GET'])
@authenticated
def me() -> Response:
    """Get the authenticated user's profile."""
    return _respond(*authentication.me(request.auth))


@blueprint.route('/auth/login', methods=['POST'])
@anonymous_only
def login() -> Response:
    """Log in with e-mail and password, and get a bearer token."""
    return _respond(*authentication.login(
        _form_data(),
        request.remote_addr,
        SessionStore.current_session(),
        LoginThrottle.current_throttle()
    ))


@blueprint.route('/auth/logout', methods=['POST'])
@authenticated
def logout() -> Response:
    """Invalidate the bearer token."""
    return _respond(*authentication.logout(request.auth_token,
                                           SessionStore.current_session()))


@blueprint.route('/auth/refresh', methods=['POST'])
@authenticated
def refresh() -> Response:
    """Exchange the bearer token for a new one."""
    return _respond(*authentication.refresh(request.auth_token,
                                            SessionStore.current_session()))


@blueprint.route('/messages', methods=['GET'])
@authenticated
def index() -> Response:
    """List the messages sent to the authenticated user."""
    return _respond(*messages.index(request.auth))


@blueprint.route('/<string:username>/send', methods=['POST'])
def send(username: str) -> Response:
    """Send an anonymous message to a user."""
    return _respond(*messages.send(username, _form_data()))
