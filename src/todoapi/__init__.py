"""Todo API — per-user todo lists behind token authentication.

Users register with email and password, log in to receive an auth
token, and manage their own todos. Every todo query is scoped to the
token's owner.
"""

__version__ = "0.1.0"
