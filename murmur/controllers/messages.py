"""Controllers for sending messages and reading the messages received."""

import logging
from http import HTTPStatus as status
from typing import Any, Dict, Tuple

from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import NotFound

from .. import domain
from ..services import datastore
from .forms import MessageForm

logger = logging.getLogger(__name__)

ResponseData = Tuple[Any, int, Dict[str, str]]


def send(username: str, form_data: MultiDict) -> ResponseData:
    """
    Send a message to the user with ``username``.

    Senders are anonymous. The message is either written (``message``) or
    recorded (``record``); if both are given, the written message is kept.

    Returns
    -------
    dict
        The stored message, or an error keyed by the offending field.
    int
        201 if the message was stored, or 422 if it is not valid.
    dict
        Headers to add to the response.

    Raises
    ------
    :class:`NotFound`
        There is no user with ``username``.

    """
    try:
        recipient = datastore.get_user_by_username(username)
    except datastore.NoSuchUser as e:
        raise NotFound('No such user') from e

    form = MessageForm(form_data)
    if not form.validate():
        logger.debug('Message for %s is not valid: %s', username, form.errors)
        return form.first_error, status.UNPROCESSABLE_ENTITY, {}

    message = datastore.store_message(recipient.user_id, form.body)
    return to_json(message), status.CREATED, {}


def index(session: domain.Session) -> ResponseData:
    """List the messages sent to the authenticated user, oldest first."""
    messages = datastore.get_messages(session.user.user_id)
    return [to_json(message) for message in messages], status.OK, {}


def to_json(message: domain.Message) -> dict:
    """Public representation of a :class:`domain.Message`."""
    return {
        'id': message.message_id,
        'user_id': message.user_id,
        'message': message.text,
        'record': message.record,
        'created_at':
            message.created.isoformat() if message.created else None,
        'updated_at':
            message.updated.isoformat() if message.updated else None
    }
