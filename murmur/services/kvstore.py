"""
Connections to the distributed key-value store.

Sessions and login throttling counters both live in redis. Set
``REDIS_FAKE`` to use an in-process :mod:`fakeredis` server instead; each
application instance then gets its own fake server, shared by all of the
connections made for that application.
"""

import logging
from typing import Optional

import fakeredis
import redis
from redis.cluster import RedisCluster
from flask import Flask, current_app

logger = logging.getLogger(__name__)

FAKE_SERVER = 'murmur.fakeredis'


def init_app(app: Flask) -> None:
    """Set default configuration parameters for an application instance."""
    config = app.config
    config.setdefault('REDIS_HOST', 'localhost')
    config.setdefault('REDIS_PORT', '6379')
    config.setdefault('REDIS_DATABASE', '0')
    config.setdefault('REDIS_TOKEN', None)
    config.setdefault('REDIS_CLUSTER', '0')
    config.setdefault('REDIS_FAKE', False)
    if config['REDIS_FAKE']:
        app.extensions[FAKE_SERVER] = fakeredis.FakeServer()


def get_connection(app: Optional[Flask] = None) -> redis.Redis:
    """Get a new connection to redis, as configured for ``app``."""
    if app is None:
        app = current_app
    config = app.config
    fake_server = app.extensions.get(FAKE_SERVER)
    if fake_server is not None:
        logger.warning('Using FakeRedis')
        return fakeredis.FakeStrictRedis(server=fake_server)

    host = config.get('REDIS_HOST', 'localhost')
    port = int(config.get('REDIS_PORT', '6379'))
    db = int(config.get('REDIS_DATABASE', '0'))
    token = config.get('REDIS_TOKEN', None)
    logger.debug('New Redis connection at %s, port %s', host, port)
    if str(config.get('REDIS_CLUSTER', '0')) == '1':
        return RedisCluster(host=host, port=port, password=token)
    return redis.StrictRedis(host=host, port=port, db=db, password=token)
