from .routes import invoices_router

__all__ = ["invoices_router"]
