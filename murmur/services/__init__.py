"""Integrations with the database and the distributed key-value store."""
