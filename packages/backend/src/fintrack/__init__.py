"""fintrack — personal finance tracker backend.

Accounts and transactions behind bearer-token authentication.
Short-lived access tokens authorize requests; longer-lived refresh
tokens (sent as an http-only cookie) rotate the pair.
"""

__version__ = "0.1.0"
