"""
Core utilities shared across the accounts API.

This package hosts configuration (env vars), the error taxonomy, logging
setup and password hashing. Services and routers depend on these primitives
instead of reading os.environ or the hashing library directly.
"""
