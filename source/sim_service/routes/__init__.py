from .devices import devices_router

__all__ = ["devices_router"]
