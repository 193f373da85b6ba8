import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from volunteer_api.core.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("volunteers_needed >= 0", name="ck_posts_volunteers_needed_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)

    # ownership
    organizer_email = Column(String(320), nullable=False, index=True)

    deadline = Column(DateTime(timezone=True), nullable=False, index=True)

    # Capacity counter; decremented once per accepted volunteer request.
    volunteers_needed = Column(Integer, nullable=False, default=0)

    # Free-form descriptive fields (title, description, category, location, ...).
    details = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
