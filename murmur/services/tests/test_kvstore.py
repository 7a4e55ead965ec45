"""Tests for :mod:`murmur.services.kvstore`."""

from unittest import TestCase, mock

from flask import Flask

from murmur.services import kvstore


class TestGetConnection(TestCase):
    """Connections are made as configured."""

    def test_fake(self):
        """Fake connections for the same app share their data."""
        app = Flask('test')
        app.config['REDIS_FAKE'] = True
        kvstore.init_app(app)
        kvstore.get_connection(app).set('foo', 'bar')
        self.assertEqual(kvstore.get_connection(app).get('foo'), b'bar')

        other = Flask('other')
        other.config['REDIS_FAKE'] = True
        kvstore.init_app(other)
        self.assertIsNone(kvstore.get_connection(other).get('foo'))

    @mock.patch(f'{kvstore.__name__}.redis')
    def test_single_node(self, mock_redis):
        """A single redis node is used by default."""
        app = Flask('test')
        app.config.update(REDIS_HOST='redis', REDIS_PORT='1234',
                          REDIS_DATABASE='4', REDIS_TOKEN='tok')
        kvstore.init_app(app)
        kvstore.get_connection(app)
        mock_redis.StrictRedis.assert_called_once_with(
            host='redis', port=1234, db=4, password='tok'
        )

    @mock.patch(f'{kvstore.__name__}.RedisCluster')
    def test_cluster(self, mock_cluster):
        """A redis cluster is used if configured."""
        app = Flask('test')
        app.config.update(REDIS_HOST='redis', REDIS_PORT='7000',
                          REDIS_CLUSTER='1')
        kvstore.init_app(app)
        kvstore.get_connection(app)
        mock_cluster.assert_called_once_with(host='redis', port=7000,
                                             password=None)
