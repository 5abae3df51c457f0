from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── Application ──────────────────────────────────────────────
    app_name: str = "OfficeDesk Panel"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    api_version: str = "v1"

    # ── Remote office API ────────────────────────────────────────
    remote_api_url: str = "http://127.0.0.1:5000"
    remote_api_timeout: float = 30.0

    # ── JWT / Security ───────────────────────────────────────────
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    session_expire_minutes: int = 720  # 12 hours

    # ── List views ───────────────────────────────────────────────
    employee_page_size: int = 10
    invoice_page_size: int = 5
    kpi_page_size: int = 10
    subadmin_page_size: int = 5
    date_sort_batch_size: int = 100

    # ── Invoice companies ────────────────────────────────────────
    invoice_companies: dict[str, dict[str, str]] = {
        "mhd": {
            "label": "MHD Tech",
            "prefix": "/invoiceMHD",
            "settings": "/invoice/settings",
        },
        "enoylitystudio": {
            "label": "Enoylity Studio",
            "prefix": "/invoiceEnoylity",
            "settings": "/invoiceEnoylity/settings",
        },
        "enoylitytech": {
            "label": "Enoylity Tech",
            "prefix": "/enoylity",
            "settings": "/enoylity/settings",
        },
    }

    # ── CORS ─────────────────────────────────────────────────────
    cors_allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    cors_allow_credentials: bool = True
    cors_allowed_methods: list[str] = ["*"]
    cors_allowed_headers: list[str] = ["*"]

    frontend_url: Optional[str] = None

    class Config:
        env_file = ".env.local"
        extra = "ignore"


# ── Module-level singleton ──────────────────────────────────────
settings = Settings()
