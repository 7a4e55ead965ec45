"""Tests for :mod:`murmur.services.throttle`."""

from unittest import TestCase

import fakeredis

from murmur.services.throttle import LoginThrottle


class TestThrottleKey(TestCase):
    """The throttle key combines the login identifier and the client IP."""

    def test_key(self):
        """The identifier is lower-cased."""
        self.assertEqual(
            LoginThrottle.throttle_key('Alice@Example.com', '10.0.0.1'),
            'alice@example.com|10.0.0.1'
        )

    def test_missing_identifier(self):
        """A missing identifier still yields a key for the client."""
        self.assertEqual(LoginThrottle.throttle_key(None, '10.0.0.1'),
                         '|10.0.0.1')


class TestLoginThrottle(TestCase):
    """Failed attempts are counted in redis."""

    def setUp(self):
        self.r = fakeredis.FakeStrictRedis()
        self.throttle = LoginThrottle(self.r, max_attempts=3, decay=60)
        self.key = LoginThrottle.throttle_key('alice@example.com', '10.0.0.1')

    def test_below_limit(self):
        """Fewer failures than the limit do not lock the key out."""
        self.assertFalse(self.throttle.too_many_attempts(self.key))
        self.throttle.increment(self.key)
        self.throttle.increment(self.key)
        self.assertEqual(self.throttle.attempts(self.key), 2)
        self.assertFalse(self.throttle.too_many_attempts(self.key))

    def test_increment_by_one(self):
        """Each failure increments the count by exactly one."""
        self.assertEqual(self.throttle.increment(self.key), 1)
        self.assertEqual(self.throttle.increment(self.key), 2)

    def test_lockout(self):
        """Reaching the limit locks the key out."""
        for _ in range(3):
            self.throttle.increment(self.key)
        self.assertTrue(self.throttle.too_many_attempts(self.key))
        available_in = self.throttle.available_in(self.key)
        self.assertGreater(available_in, 0)
        self.assertLessEqual(available_in, 60)

    def test_keys_are_independent(self):
        """A lockout for one key does not affect another."""
        for _ in range(3):
            self.throttle.increment(self.key)
        other = LoginThrottle.throttle_key('alice@example.com', '10.0.0.2')
        self.assertFalse(self.throttle.too_many_attempts(other))
        self.assertEqual(self.throttle.available_in(other), 0)

    def test_clear(self):
        """Clearing a key forgets its failures."""
        for _ in range(3):
            self.throttle.increment(self.key)
        self.throttle.clear(self.key)
        self.assertEqual(self.throttle.attempts(self.key), 0)
        self.assertFalse(self.throttle.too_many_attempts(self.key))
        self.assertEqual(self.throttle.available_in(self.key), 0)

    def test_timer_expired(self):
        """Once the lockout timer is gone, the count starts over."""
        for _ in range(3):
            self.throttle.increment(self.key)
        self.r.delete(f'{LoginThrottle.PREFIX}{self.key}:timer')
        self.assertFalse(self.throttle.too_many_attempts(self.key))
        self.assertEqual(self.throttle.attempts(self.key), 0)

    def test_keys_expire(self):
        """Counter and timer expire with the decay window."""
        self.throttle.increment(self.key)
        counter = f'{LoginThrottle.PREFIX}{self.key}'
        self.assertGreater(self.r.ttl(counter), 0)
        self.assertLessEqual(self.r.ttl(counter), 60)
        self.assertGreater(self.r.ttl(f'{counter}:timer'), 0)

    def test_fire_lockout_event(self):
        """A lockout is logged."""
        with self.assertLogs('murmur.services.throttle', level='WARNING'):
            self.throttle.fire_lockout_event(self.key)
