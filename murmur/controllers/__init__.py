"""
Request controllers for the messaging API.

Controllers are given everything they need (request data, the
authenticated session, and any services) by the route, and return a tuple
of response data, status code, and headers.
"""
