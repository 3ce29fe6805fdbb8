from .ws import ws_router

__all__ = ["ws_router"]
