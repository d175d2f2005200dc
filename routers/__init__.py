"""
Routers Module

API routers for the Voice Form Kit application.
"""

from .forms import router as forms_router
from .speech import router as speech_router
from .status import router as status_router

__all__ = ["forms_router", "speech_router", "status_router"]
