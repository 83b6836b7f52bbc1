"""Mood entry request and response models."""
import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mood_analytics.models import MoodEntry

# Activities share one comma-separated cell
Activity = Annotated[str, Field(max_length=100, pattern=r"^[^,]*$")]


class SubmitRequest(BaseModel):
    """Mood submission payload. Unknown fields are rejected."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    entry_date: datetime.date = Field(default_factory=datetime.date.today, alias="date")
    mood: float = Field(ge=1, le=10)
    notes: str = Field(default="", max_length=500)
    activities: list[Activity] = Field(default_factory=list)
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    stress_level: Optional[float] = Field(default=None, ge=1, le=10)
    energy: Optional[float] = Field(default=None, ge=0, le=10)
    anxiety: Optional[float] = Field(default=None, ge=0, le=10)
    irritability: Optional[float] = Field(default=None, ge=0, le=10)
    sheet_name: Optional[str] = Field(default=None, min_length=1, max_length=100)

    @field_validator("entry_date", mode="before")
    @classmethod
    def truncate_timestamp(cls, value):
        """Accept full ISO timestamps and keep only their date."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return datetime.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def none_notes(cls, value):
        return "" if value is None else value

    def to_entry(self, submitted_at: Optional[datetime.datetime] = None) -> MoodEntry:
        return MoodEntry(
            date=self.entry_date,
            mood=self.mood,
            notes=self.notes,
            activities=[a.strip() for a in self.activities if a.strip()],
            sleep_hours=self.sleep_hours,
            stress_level=self.stress_level,
            energy=self.energy,
            anxiety=self.anxiety,
            irritability=self.irritability,
            submitted_at=submitted_at,
        )


class MoodEntryOut(BaseModel):
    """Stored mood entry."""

    date: str
    mood: float
    notes: str = ""
    activities: list[str] = Field(default_factory=list)
    sleep_hours: Optional[float] = None
    stress_level: Optional[float] = None
    energy: Optional[float] = None
    anxiety: Optional[float] = None
    irritability: Optional[float] = None

    @classmethod
    def from_entry(cls, entry: MoodEntry) -> "MoodEntryOut":
        return cls(**entry.to_dict())
