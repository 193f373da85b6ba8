from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from volunteer_api.models.volunteer_request import VolunteerRequest
from volunteer_api.schemas.common import RESERVED_KEYS


class VolunteerRequestCreate(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    post_id: str = Field(alias="postId", min_length=1)
    volunteer_email: Optional[str] = Field(default=None, alias="volunteerEmail")

    def extra_fields(self) -> dict[str, Any]:
        return {k: v for k, v in (self.model_extra or {}).items() if k not in RESERVED_KEYS}


class VolunteerRequestOut(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id")
    post_id: str = Field(alias="postId")
    volunteer_email: str = Field(alias="volunteerEmail")

    @classmethod
    def from_request(cls, req: VolunteerRequest) -> "VolunteerRequestOut":
        doc = dict(req.details or {})
        doc.update(
            {
                "_id": req.id,
                "postId": req.post_id,
                "volunteerEmail": req.volunteer_email,
            }
        )
        return cls.model_validate(doc)


class SubmitRequestOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    inserted_id: str = Field(alias="insertedId")
    volunteers_needed: int = Field(alias="volunteersNeeded")
