"""
API Routers module.
"""
from app.routers import auth, feedback, health

__all__ = ["auth", "feedback", "health"]
