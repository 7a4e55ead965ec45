"""Provides tools for working with authenticated user sessions."""

import logging
from typing import Optional

from flask import Flask, request, Response

from . import decorators
from .exceptions import InvalidToken, ExpiredToken, UnknownSession
from .sessions import SessionStore

logger = logging.getLogger(__name__)


class Auth(object):
    """
    Attaches session and authentication information to the request.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from murmur.auth import Auth
       from murmur.routes import api


       def create_web_app() -> Flask:
          app = Flask('murmur')
          app.config.from_pyfile('config.py')
          Auth(app)   # Registers the before_request auth check
          app.register_blueprint(api.blueprint)
          return app

    """

    def __init__(self, app: Optional[Flask] = None) -> None:
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Attach :meth:`.load_session` to the Flask app."""
        self.app = app
        app.config['murmur.Auth'] = self
        SessionStore.init_app(app)
        app.before_request(self.load_session)

    def load_session(self) -> Optional[Response]:
        """
        Look for an active session, and attach it to the request.

        The bearer token is taken from the ``Authorization`` header. If it
        refers to a live session, the :class:`domain.Session` is attached
        as ``request.auth`` and the token as ``request.auth_token``.
        Otherwise both are ``None``; it is up to the route (see
        :mod:`.decorators`) to decide whether that matters.
        """
        request.auth = None
        request.auth_token = None
        token = self._bearer_token()
        if token is None:
            return None
        sessions = SessionStore.current_session()
        try:
            request.auth = sessions.load(token)
            request.auth_token = token
        except (InvalidToken, ExpiredToken, UnknownSession) as e:
            logger.debug('Rejected auth token: %s', e)
        return None

    def _bearer_token(self) -> Optional[str]:
        header = request.headers.get('Authorization')
        if not header:
            return None
        try:
            scheme, token = header.split(None, 1)
        except ValueError:
            logger.debug('Auth header malformed')
            return None
        if scheme.lower() != 'bearer':
            logger.debug('Unsupported auth scheme: %s', scheme)
            return None
        return token.strip()
