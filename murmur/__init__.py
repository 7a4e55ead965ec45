"""
Anonymous messaging service.

Anyone may send a short text message, or a reference to a recorded message,
to a user by their username. Users log in with their e-mail address and
password to obtain a bearer token, and use that token to read the messages
that have been sent to them.

A bearer token is a JSON web token that refers to a session held in the
distributed key-value store (see :mod:`murmur.auth.sessions`). Revoking
or refreshing a token removes that session, so a token is only honored for
as long as its session exists. Failed login attempts are counted per e-mail
address and client IP (see :mod:`murmur.services.throttle`), and further
attempts are refused for a while once too many have failed.
"""
