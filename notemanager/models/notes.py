from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator


class NoteColor(str, Enum):
    WHITE = "white"
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    PURPLE = "purple"


class NoteStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    DONE = "done"


def _check_end_date(value: str) -> str:
    # raises ValueError on impossible dates such as 2024-02-30
    date.fromisoformat(value)
    return value


EndDate = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$"), AfterValidator(_check_end_date)]


class Note(BaseModel):
    """A note as exchanged on the wire (camelCase) and held in memory."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    created_at: int = Field(alias="createdAt")
    color: NoteColor = NoteColor.WHITE
    end_date: Optional[EndDate] = Field(default=None, alias="endDate")
    status: NoteStatus = NoteStatus.ACTIVE

    @field_validator("end_date", mode="before")
    @classmethod
    def blank_end_date_is_none(cls, value: Any) -> Any:
        # older rows carry "" for "no due date"
        return value or None

    @property
    def is_task(self) -> bool:
        return self.end_date is not None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NoteUpdate(BaseModel):
    """Partial update body for PUT /api/notes/{id}; only sent fields are applied."""

    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = Field(default=None, min_length=1)
    color: Optional[NoteColor] = None
    end_date: Optional[EndDate] = Field(default=None, alias="endDate")
    status: Optional[NoteStatus] = None

    @field_validator("end_date", mode="before")
    @classmethod
    def blank_end_date_clears(cls, value: Any) -> Any:
        return value or None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
