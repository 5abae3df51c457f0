"""
Notices — the JSON form of the dashboard's toast / alert popups.

Every failed remote call ends up as one of these on the response instead
of propagating; the browser only renders them.
"""

from enum import Enum

from pydantic import BaseModel


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    level: NoticeLevel
    message: str

    @classmethod
    def info(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.INFO, message=message)

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.SUCCESS, message=message)

    @classmethod
    def warning(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.WARNING, message=message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.ERROR, message=message)

    @property
    def is_error(self) -> bool:
        return self.level == NoticeLevel.ERROR
