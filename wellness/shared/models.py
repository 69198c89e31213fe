from datetime import datetime, timezone

from pydantic import Field


def utcnow() -> datetime:
    """Current time as naive UTC, the form MongoDB hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    """created_at / updated_at pair; services bump updated_at before saving."""

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def update_timestamp(self) -> None:
        self.updated_at = utcnow()
