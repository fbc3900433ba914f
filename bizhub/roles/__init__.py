from .routes import roles_router

__all__ = ["roles_router"]
