"""Authentication.

Learn: Users sign up or sign in with email/password and receive a
short-lived JWT access token plus a long-lived refresh token. Protected
routes resolve the access token to a Principal (see dependencies.py).
Refreshing rotates both tokens.
"""
