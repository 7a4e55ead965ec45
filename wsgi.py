"""Web Server Gateway Interface entry-point."""

import os

from murmur.app_logging import setup_logger
from murmur.factory import create_web_app

__flask_app__ = None


def application(environ, start_response):    # type: ignore
    """WSGI application."""
    for key, value in environ.items():
        # Keep ``SERVER_NAME`` explicitly configured, either in config.py or
        # via an os.environ var loaded by config.py; uWSGI may pass in a
        # container ID here.
        if key == 'SERVER_NAME' or not isinstance(value, str):
            continue
        os.environ[key] = value

    global __flask_app__
    if __flask_app__ is None:
        __flask_app__ = create_web_app()
        if __flask_app__.config['LOG_JSON']:
            setup_logger(__flask_app__.config['LOGLEVEL'])
    return __flask_app__(environ, start_response)
