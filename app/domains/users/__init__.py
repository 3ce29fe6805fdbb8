from . import api
from .presence import persist_presence, touch_online

router = api.router

__all__ = ["router", "persist_presence", "touch_online"]
