"""
Notice Models for Finance Dashboard

A notice is a transient, user-facing message: the toast shown after a form
is saved or fails. Every notice is also written to the local structured log.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class NoticeLevel(str, Enum):
    """Severity of a notice."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NoticeKind(str, Enum):
    """What the notice is about."""
    # Writes
    RECORD_SAVED = "record_saved"
    RECORD_DELETED = "record_deleted"
    SAVE_FAILED = "save_failed"
    DELETE_FAILED = "delete_failed"

    # Reads
    FETCH_FAILED = "fetch_failed"

    # Auth
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    AUTH_FAILED = "auth_failed"


class Notice(BaseModel):
    """A single transient notification."""

    notice_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    kind: NoticeKind
    level: NoticeLevel = NoticeLevel.INFO
    message: str = Field(..., max_length=500)

    # Which table/record the notice concerns, if any
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.level == NoticeLevel.ERROR

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "notice_id": str(self.notice_id),
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind.value,
            "level": self.level.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "message": self.message,
            "details": self.details,
            "error_message": self.error_message,
        }


class NoticeBuilder:
    """
    Helper class to build notices with common patterns.

    Usage:
        notice = NoticeBuilder.record_saved("transactions", "Transaction")
        notice = NoticeBuilder.save_failed("budgets", "Budget", str(error))
    """

    @staticmethod
    def record_saved(
        entity_type: str,
        label: str,
        entity_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> Notice:
        return Notice(
            kind=NoticeKind.RECORD_SAVED,
            level=NoticeLevel.SUCCESS,
            entity_type=entity_type,
            entity_id=entity_id,
            message=f"{label} saved successfully!",
            details=details or {},
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        label: str,
        entity_id: Optional[str] = None,
    ) -> Notice:
        return Notice(
            kind=NoticeKind.RECORD_DELETED,
            level=NoticeLevel.SUCCESS,
            entity_type=entity_type,
            entity_id=entity_id,
            message=f"{label} deleted.",
        )

    @staticmethod
    def save_failed(
        entity_type: str,
        label: str,
        error_message: str,
    ) -> Notice:
        return Notice(
            kind=NoticeKind.SAVE_FAILED,
            level=NoticeLevel.ERROR,
            entity_type=entity_type,
            message=f"Failed to save {label.lower()}. Please try again.",
            error_message=error_message,
        )

    @staticmethod
    def delete_failed(
        entity_type: str,
        label: str,
        error_message: str,
        entity_id: Optional[str] = None,
    ) -> Notice:
        return Notice(
            kind=NoticeKind.DELETE_FAILED,
            level=NoticeLevel.ERROR,
            entity_type=entity_type,
            entity_id=entity_id,
            message=f"Failed to delete {label.lower()}. Please try again.",
            error_message=error_message,
        )

    @staticmethod
    def fetch_failed(
        entity_type: str,
        error_message: str,
    ) -> Notice:
        return Notice(
            kind=NoticeKind.FETCH_FAILED,
            level=NoticeLevel.WARNING,
            entity_type=entity_type,
            message=f"Could not load {entity_type.replace('_', ' ')}.",
            error_message=error_message,
        )

    @staticmethod
    def signed_in(user_id: str) -> Notice:
        return Notice(
            kind=NoticeKind.SIGNED_IN,
            level=NoticeLevel.INFO,
            entity_type="user",
            entity_id=user_id,
            message="Signed in.",
        )

    @staticmethod
    def signed_out(user_id: Optional[str] = None) -> Notice:
        return Notice(
            kind=NoticeKind.SIGNED_OUT,
            level=NoticeLevel.INFO,
            entity_type="user",
            entity_id=user_id,
            message="Signed out.",
        )

    @staticmethod
    def auth_failed(action: str, error_message: str) -> Notice:
        return Notice(
            kind=NoticeKind.AUTH_FAILED,
            level=NoticeLevel.ERROR,
            entity_type="user",
            message=f"Failed to {action}.",
            details={"action": action},
            error_message=error_message,
        )
