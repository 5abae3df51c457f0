from officedesk.remote import OfficeApiClient
from .settings import settings


class RemoteApiManager:
    """Owns the shared office API client — true singleton."""

    _instance = None
    _client: OfficeApiClient | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def connect(self) -> None:
        if self._client is not None:
            return
        self._client = OfficeApiClient(
            base_url=settings.remote_api_url,
            timeout=settings.remote_api_timeout,
        )
        print(f"[OK] Office API client ready [{settings.remote_api_url}]")

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            print("[CLOSED] Office API client closed")

    @property
    def client(self) -> OfficeApiClient:
        if self._client is None:
            raise RuntimeError("Office API client not ready. Call connect() first.")
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None


# ── Module-level singleton ──────────────────────────────────────
api_manager = RemoteApiManager()


async def get_api_client() -> OfficeApiClient:
    """FastAPI dependency — returns the shared office API client."""
    if not api_manager.is_connected:
        api_manager.connect()
    return api_manager.client
