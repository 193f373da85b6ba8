from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from volunteer_api.models.post import Post
from volunteer_api.schemas.common import RESERVED_KEYS, as_utc


class PostCreate(BaseModel):
    """
    A new volunteer post. Unknown keys (title, description, category,
    location, thumbnail, ...) are accepted and stored as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    organizer_email: Optional[str] = Field(default=None, alias="organizerEmail")
    deadline: datetime
    volunteers_needed: int = Field(default=0, ge=0, alias="volunteersNeeded")

    def extra_fields(self) -> dict[str, Any]:
        return {k: v for k, v in (self.model_extra or {}).items() if k not in RESERVED_KEYS}


class PostUpdate(BaseModel):
    """Only the keys present in the payload are replaced."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    organizer_email: Optional[str] = Field(default=None, alias="organizerEmail")
    deadline: Optional[datetime] = None
    volunteers_needed: Optional[int] = Field(default=None, ge=0, alias="volunteersNeeded")

    def extra_fields(self) -> dict[str, Any]:
        return {k: v for k, v in (self.model_extra or {}).items() if k not in RESERVED_KEYS}


class PostOut(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id")
    organizer_email: str = Field(alias="organizerEmail")
    deadline: datetime
    volunteers_needed: int = Field(alias="volunteersNeeded")

    @field_serializer("deadline")
    def serialize_dt(self, dt: datetime):
        return as_utc(dt)

    @classmethod
    def from_post(cls, post: Post) -> "PostOut":
        doc = dict(post.details or {})
        doc.update(
            {
                "_id": post.id,
                "organizerEmail": post.organizer_email,
                "deadline": post.deadline,
                "volunteersNeeded": post.volunteers_needed,
            }
        )
        return cls.model_validate(doc)
