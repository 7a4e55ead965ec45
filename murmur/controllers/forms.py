"""Provides forms for validating inbound messages."""

import json
from typing import Any

from wtforms import Form, Field, StringField
from wtforms.validators import StopValidation, ValidationError

from .. import domain

MAX_MESSAGE_LENGTH = 1500
MISSING_MESSAGE = 'You have to write a message or record a message.'


def trim(value: Any) -> Any:
    """Strip surrounding whitespace from string values."""
    if isinstance(value, str):
        return value.strip()
    return value


def is_present(value: Any) -> bool:
    """Empty strings are treated the same as missing values."""
    return value is not None and value != ''


class RequiredWithout(object):
    """
    The field is required unless ``other`` is present.

    If the field is absent (and ``other`` is not), validation of the field
    stops; otherwise, the remaining validators are run.
    """

    def __init__(self, other: str, message: str) -> None:
        self.other = other
        self.message = message

    def __call__(self, form: Form, field: Field) -> None:
        if is_present(field.data):
            return
        if is_present(form[self.other].data):
            raise StopValidation()
        raise StopValidation(self.message)


class IsString(object):
    """The field value must be a string."""

    def __call__(self, form: Form, field: Field) -> None:
        if not isinstance(field.data, str):
            raise StopValidation(f'The {field.name} must be a string.')


class MaxLength(object):
    """The field value may not be longer than ``maximum`` characters."""

    def __init__(self, maximum: int) -> None:
        self.maximum = maximum

    def __call__(self, form: Form, field: Field) -> None:
        if len(field.data) > self.maximum:
            raise ValidationError(f'The {field.name} may not be greater than'
                                  f' {self.maximum} characters.')


class MessageForm(Form):
    """
    A written message, or a reference to a recorded message.

    The record is opaque; values that are not strings are kept as JSON.
    """

    message = StringField('Message', filters=[trim], validators=[
        RequiredWithout('record', MISSING_MESSAGE),
        IsString(),
        MaxLength(MAX_MESSAGE_LENGTH)
    ])
    record = StringField('Record', filters=[trim], validators=[
        RequiredWithout('message', MISSING_MESSAGE)
    ])

    @property
    def body(self) -> domain.MessageBody:
        """The validated message body. A written message takes precedence."""
        if is_present(self.message.data):
            return domain.Text(self.message.data)
        record = self.record.data
        if not isinstance(record, str):
            record = json.dumps(record)
        return domain.Recording(record)

    @property
    def first_error(self) -> dict:
        """The first failing field, and its first error message."""
        for field, errors in self.errors.items():
            if errors:
                return {field: errors[0]}
        return {}
