"""
Core utilities shared across the intake API.

This package hosts configuration (env vars, paths, feature flags), logging
setup, password hashing and small value coercion helpers. Services and
repositories depend on these primitives instead of reading os.environ.
"""
