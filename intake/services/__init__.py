"""
High-level use cases for the intake API.

Each service module orchestrates repositories to implement business rules
(submit a registration, trash/restore it, log an admin in, export CSV...).

Routers (FastAPI endpoints) call these services instead of touching the
storage files or the session map directly.
"""
