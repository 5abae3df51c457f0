from .settings import Settings, settings
from .remote import RemoteApiManager, api_manager, get_api_client

__all__ = ["Settings", "settings", "RemoteApiManager", "api_manager", "get_api_client"]
