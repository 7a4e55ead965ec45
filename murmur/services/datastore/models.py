"""SQLAlchemy models for database integration."""

from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from pytz import UTC
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, \
    Integer, String, Text
from sqlalchemy.orm import relationship

db: SQLAlchemy = SQLAlchemy()


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(tz=UTC)


class DBUser(db.Model):  # type: ignore
    """Persistence for :class:`domain.User`."""

    __tablename__ = 'users'

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_enc = Column(String(255), nullable=False)
    created = Column(DateTime(timezone=True), default=utcnow)
    updated = Column(DateTime(timezone=True), default=utcnow,
                     onupdate=utcnow)

    messages = relationship('DBMessage', back_populates='user',
                            order_by='DBMessage.message_id')


class DBMessage(db.Model):  # type: ignore
    """
    Persistence for :class:`domain.Message`.

    A message is either written or recorded, so exactly one of ``message``
    and ``record`` is set.
    """

    __tablename__ = 'messages'
    __table_args__ = (
        CheckConstraint('message IS NOT NULL OR record IS NOT NULL',
                        name='message_or_record'),
    )

    message_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(ForeignKey('users.user_id'), nullable=False, index=True)
    message = Column(Text, nullable=True)
    record = Column(String(1024), nullable=True)
    created = Column(DateTime(timezone=True), default=utcnow)
    updated = Column(DateTime(timezone=True), default=utcnow,
                     onupdate=utcnow)

    user = relationship('DBUser', back_populates='messages')
