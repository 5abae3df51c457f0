from .routes import payslips_router

__all__ = ["payslips_router"]
