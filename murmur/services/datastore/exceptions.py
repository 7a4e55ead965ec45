"""Exceptions."""


class AuthenticationFailed(RuntimeError):
    """Failed to authenticate user with provided credentials."""


class NoSuchUser(RuntimeError):
    """User does not exist."""


class UserExists(RuntimeError):
    """A user with the same username or e-mail address already exists."""


class PasswordAuthenticationFailed(RuntimeError):
    """Password is not correct."""
