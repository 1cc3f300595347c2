from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from core.clock import from_storage


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReminderIn(_CamelModel):
    message: str = Field(
        min_length=1,
        max_length=500,
        validation_alias=AliasChoices("message", "reminderMsg"),
    )
    due_at: datetime = Field(validation_alias=AliasChoices("dueAt", "due_at", "remindAt"))

    @field_validator("message", mode="before")
    @classmethod
    def _strip_message(cls, value):
        # trimmed before the length limits apply
        return value.strip() if isinstance(value, str) else value


class ReminderDeleteIn(_CamelModel):
    id: int


class ReminderOut(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    message: str
    due_at: datetime
    notified: bool
    notified_at: datetime | None = None
    delivery_failed: bool = False
    last_error: str | None = None
    created_at: datetime | None = None

    @field_serializer("due_at", "notified_at", "created_at")
    def _as_utc(self, value: datetime | None) -> datetime | None:
        return from_storage(value)


class ExtractedReminder(_CamelModel):
    message: str
    due_at: datetime

    @field_serializer("due_at")
    def _as_utc(self, value: datetime) -> datetime:
        return from_storage(value)


class GeneratedReminderOut(BaseModel):
    message: str = "Reminder generated"
    reminder: ExtractedReminder
