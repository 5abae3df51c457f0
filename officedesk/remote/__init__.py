from .client import OfficeApiClient, BlobPayload

__all__ = ["OfficeApiClient", "BlobPayload"]
