"""FastAPI dependency injection for the services built in create_app."""
from fastapi import Request

from .services.mood_service import MoodService


def get_service(request: Request) -> MoodService:
    """Service instance owned by the running application."""
    return request.app.state.mood_service
