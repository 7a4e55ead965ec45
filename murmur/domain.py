"""Core domain concepts for the messaging service."""

from typing import Any, NamedTuple, Optional, Union
from datetime import datetime
import dateutil.parser
from pytz import UTC


class User(NamedTuple):
    """A user who can receive messages."""

    username: str
    """Public handle, used to address messages to the user."""

    email: str
    """The user's e-mail address. Used to log in."""

    user_id: Optional[int] = None
    """Unique identifier for the user. If ``None``, the user does not exist."""

    created: Optional[datetime] = None
    """When the account was created."""

    updated: Optional[datetime] = None
    """When the account was last changed."""


class Text(NamedTuple):
    """A written message."""

    text: str


class Recording(NamedTuple):
    """A recorded message, referenced by an opaque pointer to the recording."""

    reference: str


MessageBody = Union[Text, Recording]


class Message(NamedTuple):
    """A message sent to a :class:`.User`."""

    user_id: int
    """The recipient of the message."""

    body: MessageBody
    """Either a :class:`.Text` or a :class:`.Recording`."""

    message_id: Optional[int] = None
    """Unique identifier for the message. ``None`` until it is stored."""

    created: Optional[datetime] = None
    updated: Optional[datetime] = None

    @property
    def text(self) -> Optional[str]:
        """The written message, if this is not a recording."""
        if isinstance(self.body, Text):
            return self.body.text
        return None

    @property
    def record(self) -> Optional[str]:
        """The recording reference, if this is not a written message."""
        if isinstance(self.body, Recording):
            return self.body.reference
        return None


class Session(NamedTuple):
    """Represents an authenticated session."""

    session_id: str
    """Unique identifier for the session."""

    start_time: datetime
    """The datetime when the session was created."""

    user: User
    """The user for which the session was created."""

    end_time: Optional[datetime] = None
    """The datetime when the session ends."""

    ip_address: Optional[str] = None
    """The IP address of the client for which the session was created."""

    nonce: Optional[str] = None
    """A pseudo-random nonce generated when the session was created."""

    @property
    def expired(self) -> bool:
        """Expired if the current time is later than :attr:`.end_time`."""
        return bool(self.end_time is not None
                    and datetime.now(tz=UTC) >= self.end_time)

    @property
    def expires(self) -> Optional[int]:
        """
        Number of seconds until the session expires.

        If the session is already expired, returns 0.
        """
        if self.end_time is None:
            return None
        duration = (self.end_time - datetime.now(tz=UTC)).total_seconds()
        return max(int(round(duration)), 0)


def to_dict(obj: tuple) -> dict:
    """
    Generate a dict representation of a NamedTuple instance.

    This just uses the built-in ``_asdict`` method on the intance, but also
    calls this on any child NamedTuple instances (recursively) so that the
    entire tree is cast to ``dict``. Datetimes are rendered as ISO-8601.
    """
    if not hasattr(obj, '_asdict'):  # NamedTuple-generated classes have this.
        return {}
    data = obj._asdict()  # type: ignore

    def _cast(value: Any) -> Any:
        if hasattr(value, '_asdict'):
            value = to_dict(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, list):
            value = [_cast(o) for o in value]
        return value

    return {key: _cast(value) for key, value in data.items()}


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return dateutil.parser.parse(value)


def user_from_dict(data: dict) -> User:
    """Inverse of :func:`to_dict` for a :class:`.User`."""
    return User(
        username=data['username'],
        email=data['email'],
        user_id=data.get('user_id'),
        created=_parse_datetime(data.get('created')),
        updated=_parse_datetime(data.get('updated'))
    )


def session_from_dict(data: dict) -> Session:
    """Inverse of :func:`to_dict` for a :class:`.Session`."""
    return Session(
        session_id=data['session_id'],
        start_time=_parse_datetime(data['start_time']),
        user=user_from_dict(data['user']),
        end_time=_parse_datetime(data.get('end_time')),
        ip_address=data.get('ip_address'),
        nonce=data.get('nonce')
    )
