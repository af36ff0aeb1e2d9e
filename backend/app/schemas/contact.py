"""
Contact schemas (API contract). Kept in sync with frontend types/Contact.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

NO_NAME = "No Name"


def display_name(first: str | None, last: str | None) -> str:
    """Name shown in the sidebar and detail header; placeholder when both parts are empty."""
    if not first and not last:
        return NO_NAME
    return " ".join(part for part in (first, last) if part)


def _strip_at(v: str | None) -> str | None:
    if isinstance(v, str):
        return v.strip().lstrip("@")
    return v


class ContactBase(BaseModel):
    first: str | None = None
    last: str | None = None
    twitter: str | None = Field(default=None, description="Handle without the leading @")
    avatar: str | None = Field(default=None, description="Avatar image URL")
    notes: str | None = None
    favorite: bool = False

    @field_validator("twitter", mode="before")
    @classmethod
    def normalize_twitter(cls, v: str | None) -> str | None:
        return _strip_at(v)


class ContactRecord(ContactBase):
    """Stored contact. id and created_at are set by the store and never change."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime


class ContactUpdate(BaseModel):
    """Request body for partial update. Only fields present in the body are applied."""
    first: str | None = None
    last: str | None = None
    twitter: str | None = None
    avatar: str | None = None
    notes: str | None = None
    favorite: bool | None = None

    @field_validator("twitter", mode="before")
    @classmethod
    def normalize_twitter(cls, v: str | None) -> str | None:
        return _strip_at(v)

    @field_validator("favorite", mode="before")
    @classmethod
    def reject_null_favorite(cls, v: object) -> object:
        if v is None:
            raise ValueError("favorite must be true or false")
        return v


class ContactSummary(BaseModel):
    """One row of the sidebar list."""
    id: str
    display_name: str
    favorite: bool = False

    @classmethod
    def from_record(cls, record: ContactRecord) -> "ContactSummary":
        return cls(
            id=record.id,
            display_name=display_name(record.first, record.last),
            favorite=record.favorite,
        )


class ContactListResponse(BaseModel):
    """List of contacts plus the query that produced it, so the search box can be re-filled."""
    contacts: list[ContactSummary]
    q: str | None = None


class ContactDetailResponse(ContactRecord):
    """Single contact detail with the fields the detail pane renders."""
    display_name: str
    twitter_url: str | None = None

    @classmethod
    def from_record(cls, record: ContactRecord) -> "ContactDetailResponse":
        return cls(
            **record.model_dump(),
            display_name=display_name(record.first, record.last),
            twitter_url=f"https://twitter.com/{record.twitter}" if record.twitter else None,
        )


class ContactEditForm(BaseModel):
    """Current values for pre-filling the edit form."""
    id: str
    first: str = ""
    last: str = ""
    twitter: str = ""
    avatar: str = ""
    notes: str = ""

    @classmethod
    def from_record(cls, record: ContactRecord) -> "ContactEditForm":
        return cls(
            id=record.id,
            first=record.first or "",
            last=record.last or "",
            twitter=record.twitter or "",
            avatar=record.avatar or "",
            notes=record.notes or "",
        )


class ContactCreatedResponse(BaseModel):
    """Blank contact plus where the client should navigate next (its edit form)."""
    contact: ContactRecord
    redirect_to: str
