"""Flask configuration."""

import os
import secrets

SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Sets the `Flask` secret key. Not used for bearer tokens."""

#################### Bearer tokens ####################
JWT_SECRET = os.environ.get('JWT_SECRET', 'foosecret')
"""Secret used to sign bearer tokens and session records (HS256)."""

SESSION_DURATION = os.environ.get('SESSION_DURATION', '3600')
"""Lifetime of a session in seconds. Reported as ``expires_in`` at login."""

#################### Key-value store ####################
REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')
REDIS_TOKEN = os.environ.get('REDIS_TOKEN', None)
"""This is the token used in the AUTH procedure."""
REDIS_CLUSTER = os.environ.get('REDIS_CLUSTER', '0')
"""If 1, expects a redis cluster; otherwise expects a single redis node."""

REDIS_FAKE = bool(int(os.environ.get('REDIS_FAKE', '0')))
"""Use the FakeRedis library instead of a redis service.

Useful for testing, dev, beta."""

#################### Login throttling ####################
LOGIN_MAX_ATTEMPTS = os.environ.get('LOGIN_MAX_ATTEMPTS', '5')
"""Failed logins allowed per e-mail address and IP before lockout."""

LOGIN_DECAY_SECONDS = os.environ.get('LOGIN_DECAY_SECONDS', '60')
"""Window in which failed logins are counted, and length of the lockout."""

#################### Database ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite://')
SQLALCHEMY_TRACK_MODIFICATIONS = False
CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))

#################### Logging ####################
LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))
LOG_JSON = bool(int(os.environ.get('LOG_JSON', '0')))
"""If 1, log records are written to stderr as JSON."""
