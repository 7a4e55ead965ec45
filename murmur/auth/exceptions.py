"""Exceptions raised while issuing and validating bearer tokens."""


class InvalidToken(ValueError):
    """Token in request is not valid."""


class ExpiredToken(RuntimeError):
    """The session referred to by the token has expired."""


class UnknownSession(RuntimeError):
    """Failed to locate a session in the session store."""


class SessionCreationFailed(RuntimeError):
    """Failed to create a session in the session store."""


class SessionDeletionFailed(RuntimeError):
    """Failed to delete a session in the session store."""
