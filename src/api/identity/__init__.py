"""Identity bounded context.

Keeps the local users table in step with the external identity provider
and authenticates API callers from the provider's session tokens.
"""
