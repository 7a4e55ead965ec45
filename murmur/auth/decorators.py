"""
Access control for routes.

Routes are either open to anyone, restricted to authenticated users
(:func:`authenticated`), or restricted to anonymous users
(:func:`anonymous_only`). Both decorators rely on ``request.auth``, which is
set by :class:`murmur.auth.Auth` before the request is dispatched.
"""

import logging
from functools import wraps
from typing import Any, Callable

from flask import request
from werkzeug.exceptions import Forbidden, Unauthorized

logger = logging.getLogger(__name__)


def authenticated(func: Callable) -> Callable:
    """Require a valid bearer token."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        session = getattr(request, 'auth', None)
        if not session or not session.user:
            logger.debug('No valid session; aborting')
            raise Unauthorized('Not a valid session')
        return func(*args, **kwargs)
    return wrapper


def anonymous_only(func: Callable) -> Callable:
    """Refuse requests that carry a valid bearer token."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if getattr(request, 'auth', None):
            logger.debug('Already authenticated; aborting')
            raise Forbidden('Already authenticated')
        return func(*args, **kwargs)
    return wrapper
