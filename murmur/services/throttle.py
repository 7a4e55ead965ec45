"""
Throttling of failed login attempts.

Failed attempts are counted per throttle key (the e-mail address that was
tried and the client's IP address). The first failure in a window starts a
timer; once the number of failures reaches the limit, further attempts with
the same key are locked out until the timer runs out.

Both the counter and the timer are plain redis keys with an expiry, so they
clean up after themselves.
"""

import logging
import time
from typing import Optional

import redis
from flask import Flask, current_app, g

from . import kvstore

logger = logging.getLogger(__name__)


class LoginThrottle(object):
    """Counts failed login attempts in redis."""

    PREFIX = 'login_throttle:'

    def __init__(self, r: redis.Redis, max_attempts: int = 5,
                 decay: int = 60) -> None:
        self.r = r
        self._max_attempts = max_attempts
        self._decay = decay

    @staticmethod
    def throttle_key(identifier: Optional[str], ip_address: str) -> str:
        """Derive the throttle key for a login identifier and client IP."""
        if not isinstance(identifier, str):
            identifier = ''
        return f'{identifier.lower()}|{ip_address}'

    def attempts(self, key: str) -> int:
        """Number of failed attempts counted for ``key``."""
        return int(self.r.get(self._counter(key)) or 0)

    def too_many_attempts(self, key: str) -> bool:
        """Determine whether ``key`` is locked out."""
        if self.attempts(key) >= self._max_attempts:
            if self.r.exists(self._timer(key)):
                return True
            self.r.delete(self._counter(key))
        return False

    def increment(self, key: str) -> int:
        """Count a failed attempt for ``key``. Returns the new count."""
        available_at = int(time.time()) + self._decay
        self.r.set(self._timer(key), available_at, ex=self._decay, nx=True)
        added = self.r.set(self._counter(key), 0, ex=self._decay, nx=True)
        hits = int(self.r.incr(self._counter(key)))
        # The counter expired between the two commands.
        if not added and hits == 1:
            self.r.set(self._counter(key), 1, ex=self._decay)
        return hits

    def clear(self, key: str) -> None:
        """Forget all failed attempts for ``key``."""
        self.r.delete(self._counter(key), self._timer(key))

    def available_in(self, key: str) -> int:
        """Seconds until ``key`` may attempt to log in again."""
        available_at = self.r.get(self._timer(key))
        if available_at is None:
            return 0
        return max(int(available_at) - int(time.time()), 0)

    def fire_lockout_event(self, key: str) -> None:
        """Report that ``key`` has been locked out."""
        logger.warning('Login locked out for %s; available in %i seconds',
                       key, self.available_in(key))

    def _counter(self, key: str) -> str:
        return f'{self.PREFIX}{key}'

    def _timer(self, key: str) -> str:
        return f'{self.PREFIX}{key}:timer'

    @classmethod
    def init_app(cls, app: Flask) -> None:
        """Set default configuration parameters for an application instance."""
        app.config.setdefault('LOGIN_MAX_ATTEMPTS', '5')
        app.config.setdefault('LOGIN_DECAY_SECONDS', '60')

    @classmethod
    def get_throttle(cls, app: Optional[Flask] = None) -> 'LoginThrottle':
        """Get a new throttle, configured for ``app``."""
        if app is None:
            app = current_app
        return cls(kvstore.get_connection(app),
                   max_attempts=int(app.config['LOGIN_MAX_ATTEMPTS']),
                   decay=int(app.config['LOGIN_DECAY_SECONDS']))

    @classmethod
    def current_throttle(cls) -> 'LoginThrottle':
        """Get/create :class:`.LoginThrottle` for this context."""
        if 'throttle' not in g:
            g.throttle = cls.get_throttle()
        return g.throttle  # type: ignore
