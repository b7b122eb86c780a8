"""Registration intake backend: public enrollment form plus an admin JSON API."""

__version__ = "1.0.0"
