"""
FastAPI dependencies for API routes.

Re-exports auth dependencies for convenience.
"""

from decisionhub.auth.dependencies import get_db, get_services, get_user_email, get_user_id

__all__ = ["get_db", "get_services", "get_user_email", "get_user_id"]
