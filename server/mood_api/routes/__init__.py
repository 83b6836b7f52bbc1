"""API route modules."""
from .mood import router as mood_router
from .submit import router as submit_router

__all__ = [
    "mood_router",
    "submit_router",
]
