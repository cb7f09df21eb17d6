"""Authentication and authorization.

Users log in with email/password and receive a JWT bearer token carrying
their integer id and role. HTTP routes resolve the token into a
CurrentIdentity; the realtime channel can optionally verify the same
token at connect time.
"""
