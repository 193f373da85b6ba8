from sqlalchemy import Column, DateTime, String, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from volunteer_api.core.base import Base
from volunteer_api.models.post import new_id


class VolunteerRequest(Base):
    __tablename__ = "volunteer_requests"
    __table_args__ = (
        # One request per volunteer per post.
        UniqueConstraint("post_id", "volunteer_email", name="uq_volunteer_requests_post_volunteer"),
    )

    id = Column(String(36), primary_key=True, default=new_id)

    # Plain reference, not a foreign key: deleting a post leaves its requests behind.
    post_id = Column(String(36), nullable=False, index=True)

    # ownership
    volunteer_email = Column(String(320), nullable=False, index=True)

    details = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
