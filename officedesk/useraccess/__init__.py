from .routes import useraccess_router

__all__ = ["useraccess_router"]
