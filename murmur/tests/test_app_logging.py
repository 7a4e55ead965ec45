"""Tests for :mod:`murmur.app_logging`."""

import logging
from unittest import TestCase

from pythonjsonlogger import jsonlogger

from murmur.app_logging import setup_logger


class TestSetupLogger(TestCase):
    """Log records can be written as JSON."""

    def setUp(self):
        self.root = logging.getLogger()
        self.level = self.root.level

    def tearDown(self):
        self.root.removeHandler(self.handler)
        self.root.setLevel(self.level)

    def test_setup_logger(self):
        """A single JSON handler is attached to the root logger."""
        self.handler = setup_logger(logging.DEBUG)
        self.assertIsInstance(self.handler.formatter, jsonlogger.JsonFormatter)
        self.assertIn(self.handler, self.root.handlers)
        self.assertEqual(self.root.level, logging.DEBUG)

        self.assertIs(setup_logger(logging.WARNING), self.handler)
        self.assertEqual(self.root.level, logging.WARNING)
