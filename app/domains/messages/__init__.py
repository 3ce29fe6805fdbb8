from . import api, models
from .events import register_event_handlers

router = api.router

__all__ = ["router", "register_event_handlers"]
