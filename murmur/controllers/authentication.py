"""
Controllers for logging in and out, and for managing bearer tokens.

When a user logs in they are issued a bearer token. That token refers to a
session in the distributed keystore (see :mod:`murmur.auth.sessions`), which
holds the user's identity. Logging out deletes the session; refreshing the
token replaces the session with a new one.

Failed logins are counted per e-mail address and client IP by the
:class:`.LoginThrottle`; once there have been too many, further attempts
are refused until the lockout expires.
"""

import logging
from http import HTTPStatus as status
from typing import Any, Dict, Optional, Tuple

from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import InternalServerError, Unauthorized

from .. import domain
from ..auth.exceptions import SessionCreationFailed, SessionDeletionFailed, \
    InvalidToken, ExpiredToken, UnknownSession
from ..auth.sessions import SessionStore
from ..services import datastore
from ..services.throttle import LoginThrottle

logger = logging.getLogger(__name__)

ResponseData = Tuple[Any, int, Dict[str, str]]

USERNAME = 'email'
"""The request field that identifies the user logging in."""

AUTH_FAILED = 'These credentials do not match our records.'
AUTH_THROTTLE = 'Too many login attempts. Please try again in {seconds}' \
    ' seconds.'


def login(form_data: MultiDict, ip: str, sessions: SessionStore,
          throttle: LoginThrottle) -> ResponseData:
    """
    Log a user in with their e-mail address and password.

    Parameters
    ----------
    form_data : MultiDict
        Should include `email` and `password`. Anything else is ignored.
    ip : str
        IP address of the client.
    sessions : :class:`.SessionStore`
    throttle : :class:`.LoginThrottle`

    Returns
    -------
    dict
        A token response, or an error keyed by ``email``.
    int
        200 on success, 422 if the credentials are wrong, or 429 if the
        client is locked out.
    dict
        Headers to add to the response.

    """
    email: Optional[str] = form_data.get(USERNAME)
    password: Optional[str] = form_data.get('password')
    key = throttle.throttle_key(email, ip)

    if throttle.too_many_attempts(key):
        throttle.fire_lockout_event(key)
        seconds = throttle.available_in(key)
        data = {USERNAME: AUTH_THROTTLE.format(seconds=seconds,
                                               minutes=seconds // 60)}
        return data, status.TOO_MANY_REQUESTS, {'Retry-After': str(seconds)}

    try:
        user = datastore.authenticate(email, password)
    except datastore.AuthenticationFailed as e:
        logger.debug('Authentication failed for %s: %s', email, e)
        throttle.increment(key)
        return {USERNAME: AUTH_FAILED}, status.UNPROCESSABLE_ENTITY, {}

    throttle.clear(key)
    try:
        session, token = sessions.create(user, ip)
    except SessionCreationFailed as e:
        logger.error('Could not create session: %s', e)
        raise InternalServerError('Cannot log in') from e
    return _token_response(session, token), status.OK, {}


def me(session: domain.Session) -> ResponseData:
    """Get the public profile of the authenticated user."""
    try:
        user = datastore.get_user(session.user.user_id)
    except datastore.NoSuchUser as e:
        logger.debug('Session %s refers to a missing user',
                     session.session_id)
        raise Unauthorized('Not a valid session') from e
    return profile(user), status.OK, {}


def logout(token: str, sessions: SessionStore) -> ResponseData:
    """Log the user out, by deleting the session behind their token."""
    logger.debug('Request to log out')
    try:
        sessions.delete(token)
    except InvalidToken as e:
        raise Unauthorized('Not a valid session') from e
    except SessionDeletionFailed as e:
        logger.error('Logout failed: %s', e)
        raise InternalServerError('Cannot log out') from e
    return {'message': 'Successfully logged out'}, status.OK, {}


def refresh(token: str, sessions: SessionStore) -> ResponseData:
    """Issue a new token for the authenticated user, retiring ``token``."""
    try:
        session, new_token = sessions.refresh(token)
    except (InvalidToken, ExpiredToken, UnknownSession) as e:
        raise Unauthorized('Not a valid session') from e
    except (SessionCreationFailed, SessionDeletionFailed) as e:
        logger.error('Refresh failed: %s', e)
        raise InternalServerError('Cannot refresh token') from e
    return _token_response(session, new_token), status.OK, {}


def profile(user: domain.User) -> dict:
    """Public representation of a :class:`domain.User`."""
    return {
        'id': user.user_id,
        'username': user.username,
        'email': user.email,
        'created_at': user.created.isoformat() if user.created else None,
        'updated_at': user.updated.isoformat() if user.updated else None
    }


def _token_response(session: domain.Session, token: str) -> dict:
    return {
        'access_token': token,
        'token_type': 'bearer',
        'expires_in': session.expires
    }
