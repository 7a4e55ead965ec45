"""Tests for :mod:`murmur.services.datastore.passwords`."""

from unittest import TestCase

from murmur.services.datastore import passwords
from murmur.services.datastore.exceptions import \
    PasswordAuthenticationFailed


class TestPasswords(TestCase):
    """Passwords are stored as salted hashes."""

    def test_check_password(self):
        """A password matches its own hash."""
        encrypted = passwords.hash_password('thepassword')
        self.assertNotIn('thepassword', encrypted)
        self.assertIsNone(passwords.check_password('thepassword', encrypted))

    def test_wrong_password(self):
        """Any other password does not match."""
        encrypted = passwords.hash_password('thepassword')
        with self.assertRaises(PasswordAuthenticationFailed):
            passwords.check_password('thepassword!', encrypted)

    def test_salted(self):
        """The same password hashes differently each time."""
        self.assertNotEqual(passwords.hash_password('thepassword'),
                            passwords.hash_password('thepassword'))

    def test_malformed_hash(self):
        """A hash that cannot be decoded never matches."""
        with self.assertRaises(PasswordAuthenticationFailed):
            passwords.check_password('thepassword', 'not!base64')
