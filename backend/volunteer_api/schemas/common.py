from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


# Keys a client may not smuggle into the free-form part of a document:
# ids plus both spellings of every column-backed field.
RESERVED_KEYS = frozenset(
    {
        "_id",
        "id",
        "organizerEmail",
        "organizer_email",
        "deadline",
        "volunteersNeeded",
        "volunteers_needed",
        "postId",
        "post_id",
        "volunteerEmail",
        "volunteer_email",
    }
)


def as_utc(dt: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class InsertedOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inserted_id: str = Field(alias="insertedId")


class UpdateResultOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    matched_count: int = Field(alias="matchedCount")
    modified_count: int = Field(alias="modifiedCount")


class DeleteResultOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deleted_count: int = Field(alias="deletedCount")
