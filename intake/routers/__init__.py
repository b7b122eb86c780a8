"""
FastAPI routers grouped by domain (submissions, admin auth, courses).

Each module exposes an APIRouter that create_app() includes. Services are
looked up on ``request.app.state`` through the helpers in ``deps``.
"""
