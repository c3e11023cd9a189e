"""Authentication and authorization.

Learn: email/password → bcrypt-verified login → signed auth token that
is also recorded on the user row. Protected routes resolve the token
back to a user and scope every todo query to that user's id.
"""
