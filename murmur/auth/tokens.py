"""Functions for working with bearer tokens on user requests."""

import jwt
from . import exceptions


def encode(claims: dict, secret: str) -> str:
    """Encode claims as a signed JWT."""
    return jwt.encode(claims, secret, algorithm='HS256')


def decode(token: str, secret: str) -> dict:
    """Decode a bearer token to access its claims."""
    try:
        return dict(jwt.decode(token, secret, algorithms=['HS256']))
    except jwt.exceptions.InvalidTokenError as e:
        raise exceptions.InvalidToken('Not a valid token') from e
