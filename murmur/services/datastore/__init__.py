"""Database integration for users and the messages sent to them."""

import logging
from datetime import datetime
from typing import List, Optional

from pytz import UTC
from sqlalchemy.exc import IntegrityError

from . import util, models, passwords
from .exceptions import AuthenticationFailed, NoSuchUser, UserExists, \
    PasswordAuthenticationFailed
from ... import domain

logger = logging.getLogger(__name__)

init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all
transaction = util.transaction


def get_user(user_id: int) -> domain.User:
    """
    Load a :class:`domain.User` by its unique identifier.

    Raises
    ------
    :class:`NoSuchUser`
        Raised when the user cannot be found.

    """
    with util.transaction() as session:
        db_user = session.get(models.DBUser, user_id)
        if db_user is None:
            raise NoSuchUser(f'No user with id {user_id}')
        return _to_domain_user(db_user)


def get_user_by_username(username: str) -> domain.User:
    """
    Load a :class:`domain.User` by username.

    Raises
    ------
    :class:`NoSuchUser`
        Raised when the user cannot be found.

    """
    with util.transaction() as session:
        db_user = session.query(models.DBUser) \
            .filter(models.DBUser.username == username) \
            .first()
        if db_user is None:
            raise NoSuchUser(f'No user with username {username}')
        return _to_domain_user(db_user)


def authenticate(email: str, password: str) -> domain.User:
    """
    Validate e-mail address and password. If successful, retrieve the user.

    Raises
    ------
    :class:`AuthenticationFailed`
        Raised if the user does not exist or the password is incorrect.

    """
    if not isinstance(email, str) or not isinstance(password, str) \
            or not email or not password:
        logger.debug('E-mail and password are both required')
        raise AuthenticationFailed('E-mail and password required')
    with util.transaction() as session:
        db_user = session.query(models.DBUser) \
            .filter(models.DBUser.email == email) \
            .first()
        if db_user is None:
            logger.debug('No such user: %s', email)
            raise AuthenticationFailed('Invalid e-mail or password')
        try:
            passwords.check_password(password, db_user.password_enc)
        except PasswordAuthenticationFailed as e:
            logger.debug('Wrong password for user %s', db_user.user_id)
            raise AuthenticationFailed('Invalid e-mail or password') from e
        return _to_domain_user(db_user)


def create_user(username: str, email: str, password: str) -> domain.User:
    """
    Create a new user account.

    Raises
    ------
    :class:`UserExists`
        Raised when the username or e-mail address is already taken.

    """
    db_user = models.DBUser(
        username=username,
        email=email,
        password_enc=passwords.hash_password(password)
    )
    try:
        with util.transaction() as session:
            session.add(db_user)
    except IntegrityError as e:
        raise UserExists(f'Username or e-mail already in use: {e}') from e
    return _to_domain_user(db_user)


def store_message(user_id: int, body: domain.MessageBody) -> domain.Message:
    """
    Persist a new message for the recipient ``user_id``.

    Only the column that corresponds to the kind of ``body`` is set.
    """
    if isinstance(body, domain.Text):
        db_message = models.DBMessage(user_id=user_id, message=body.text)
    else:
        db_message = models.DBMessage(user_id=user_id, record=body.reference)
    with util.transaction() as session:
        session.add(db_message)
    logger.debug('Stored message %s for user %s',
                 db_message.message_id, user_id)
    return _to_domain_message(db_message)


def get_messages(user_id: int) -> List[domain.Message]:
    """Get all of the messages sent to a user, in the order they arrived."""
    with util.transaction() as session:
        db_messages = session.query(models.DBMessage) \
            .filter(models.DBMessage.user_id == user_id) \
            .order_by(models.DBMessage.message_id) \
            .all()
        return [_to_domain_message(db_message) for db_message in db_messages]


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite does not keep the offset; stored values are always UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain_user(db_user: models.DBUser) -> domain.User:
    return domain.User(
        user_id=db_user.user_id,
        username=db_user.username,
        email=db_user.email,
        created=_utc(db_user.created),
        updated=_utc(db_user.updated)
    )


def _to_domain_message(db_message: models.DBMessage) -> domain.Message:
    body: domain.MessageBody
    if db_message.message is not None:
        body = domain.Text(db_message.message)
    else:
        body = domain.Recording(db_message.record)
    return domain.Message(
        message_id=db_message.message_id,
        user_id=db_message.user_id,
        body=body,
        created=_utc(db_message.created),
        updated=_utc(db_message.updated)
    )
