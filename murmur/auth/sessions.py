"""
Internal service API for the distributed session store.

Used to create, delete, refresh, and verify user sessions. A session is
held in the key-value store under its session ID, as a signed JWT, and
expires along with the session. The bearer token handed to the user is a
separate JWT that carries just enough to find and verify the session.
"""

import logging
import random
import uuid
from datetime import datetime, timedelta
from typing import Optional, Tuple

import dateutil.parser
import redis
from flask import Flask, current_app, g
from pytz import UTC

from . import tokens
from .exceptions import SessionCreationFailed, SessionDeletionFailed, \
    InvalidToken, ExpiredToken, UnknownSession
from .. import domain
from ..services import kvstore

logger = logging.getLogger(__name__)


def _generate_nonce(length: int = 8) -> str:
    return ''.join([str(random.randint(0, 9)) for i in range(length)])


class SessionStore(object):
    """
    Manages sessions in redis.

    The redis client is thread safe and connections are attached at the
    time a command is executed. This class simply provides a container for
    configuration.
    """

    def __init__(self, r: redis.Redis, secret: str,
                 duration: int = 3600) -> None:
        self.r = r
        self._secret = secret
        self._duration = duration

    def create(self, user: domain.User,
               ip_address: Optional[str] = None) -> Tuple[domain.Session, str]:
        """
        Create a new session, and generate a bearer token for it.

        Parameters
        ----------
        user : :class:`domain.User`
        ip_address : str

        Returns
        -------
        :class:`domain.Session`
        str
            The bearer token.

        Raises
        ------
        :class:`SessionCreationFailed`

        """
        session_id = str(uuid.uuid4())
        start_time = datetime.now(tz=UTC)
        end_time = start_time + timedelta(seconds=self._duration)
        session = domain.Session(
            session_id=session_id,
            user=user,
            start_time=start_time,
            end_time=end_time,
            ip_address=ip_address,
            nonce=_generate_nonce()
        )
        try:
            self.r.set(session_id, self._encode(domain.to_dict(session)),
                       ex=self._duration)
        except redis.exceptions.ConnectionError as e:
            raise SessionCreationFailed(f'Connection failed: {e}') from e
        except Exception as e:
            raise SessionCreationFailed(f'Failed to create: {e}') from e
        logger.debug('Created session %s for user %s', session_id,
                     user.user_id)
        return session, self.generate_token(session)

    def generate_token(self, session: domain.Session) -> str:
        """Generate a bearer token from a :class:`domain.Session`."""
        return tokens.encode({
            'user_id': session.user.user_id,
            'session_id': session.session_id,
            'nonce': session.nonce,
            'expires': session.end_time.isoformat()
        }, self._secret)

    def load(self, token: str) -> domain.Session:
        """
        Load a session using a bearer token.

        Raises
        ------
        :class:`InvalidToken`
            The token is malformed, forged, or past its expiry.
        :class:`ExpiredToken`
            The session has expired.
        :class:`UnknownSession`
            The session has been deleted, or never existed.

        """
        token_data = tokens.decode(token, self._secret)
        try:
            expires = dateutil.parser.parse(token_data['expires'])
            session_id = token_data['session_id']
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken('Token payload malformed') from e

        if expires <= datetime.now(tz=UTC):
            raise InvalidToken('Session has expired')

        session = self.load_by_id(session_id)
        if session.expired:
            raise ExpiredToken('Session has expired')
        if token_data.get('nonce') != session.nonce \
                or token_data.get('user_id') != session.user.user_id:
            raise InvalidToken('Invalid token; likely a forgery')
        return session

    def load_by_id(self, session_id: str) -> domain.Session:
        """Get session data by session ID."""
        session_jwt = self.r.get(session_id)
        if not session_jwt:
            logger.debug('No such session: %s', session_id)
            raise UnknownSession(f'Failed to find session {session_id}')
        return self._decode(session_jwt)

    def delete(self, token: str) -> None:
        """
        Delete the session referred to by a bearer token.

        Raises
        ------
        :class:`InvalidToken`
        :class:`SessionDeletionFailed`

        """
        token_data = tokens.decode(token, self._secret)
        try:
            session_id = token_data['session_id']
        except KeyError as e:
            raise InvalidToken('Token payload malformed') from e
        self.delete_by_id(session_id)

    def delete_by_id(self, session_id: str) -> None:
        """Delete a session in the key-value store by ID."""
        try:
            self.r.delete(session_id)
        except redis.exceptions.ConnectionError as e:
            raise SessionDeletionFailed(f'Connection failed: {e}') from e
        except Exception as e:
            raise SessionDeletionFailed(f'Failed to delete: {e}') from e
        logger.debug('Deleted session %s', session_id)

    def refresh(self, token: str) -> Tuple[domain.Session, str]:
        """
        Replace the session behind ``token`` with a new one.

        The old token stops working as soon as this returns.
        """
        session = self.load(token)
        self.delete_by_id(session.session_id)
        return self.create(session.user, session.ip_address)

    def _encode(self, session_data: dict) -> str:
        return tokens.encode(session_data, self._secret)

    def _decode(self, session_jwt: bytes) -> domain.Session:
        try:
            data = tokens.decode(session_jwt, self._secret)
            return domain.session_from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken('Invalid or corrupted session record') from e

    @classmethod
    def init_app(cls, app: Flask) -> None:
        """Set default configuration parameters for an application instance."""
        config = app.config
        config.setdefault('JWT_SECRET', 'foosecret')
        config.setdefault('SESSION_DURATION', '3600')

    @classmethod
    def get_session(cls, app: Optional[Flask] = None) -> 'SessionStore':
        """Get a new session store, configured for ``app``."""
        if app is None:
            app = current_app
        config = app.config
        secret = config['JWT_SECRET']
        duration = int(config.get('SESSION_DURATION', '3600'))
        return cls(kvstore.get_connection(app), secret, duration)

    @classmethod
    def current_session(cls) -> 'SessionStore':
        """Get/create :class:`.SessionStore` for this context."""
        if 'sessions' not in g:
            g.sessions = cls.get_session()
        return g.sessions  # type: ignore
