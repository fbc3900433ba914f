from .routes import customers_router

__all__ = ["customers_router"]
