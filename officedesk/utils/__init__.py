from .helpers import (
    success_response,
    error_response,
    notice_response,
    download_response,
    remote_error_response,
)
from .logger import Logger
from .notices import Notice, NoticeLevel

__all__ = [
    "success_response",
    "error_response",
    "notice_response",
    "download_response",
    "remote_error_response",
    "Logger",
    "Notice",
    "NoticeLevel",
]
