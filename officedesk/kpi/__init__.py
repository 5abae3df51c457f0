from .routes import kpi_router

__all__ = ["kpi_router"]
