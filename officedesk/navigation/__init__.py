from .service import build_dashboard, build_sidebar
from .routes import navigation_router

__all__ = ["build_dashboard", "build_sidebar", "navigation_router"]
