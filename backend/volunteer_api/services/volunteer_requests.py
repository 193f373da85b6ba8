"""
Volunteer request ledger.

Submitting a request is two store-enforced steps inside one transaction:
a conditional decrement of the post's capacity (only when it is above
zero) and an insert guarded by the UNIQUE(post_id, volunteer_email)
constraint. If the insert is rejected the rollback also undoes the
decrement, so concurrent submissions can never over-commit a post.
"""
from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from volunteer_api.auth.identity import Identity, normalize_email
from volunteer_api.models.post import Post
from volunteer_api.models.volunteer_request import VolunteerRequest
from volunteer_api.schemas.volunteer_request import VolunteerRequestCreate
from volunteer_api.services.ids import parse_id
from volunteer_api.services.posts import ensure_owner

logger = logging.getLogger(__name__)


def submit_request(db: Session, identity: Identity, payload: VolunteerRequestCreate) -> tuple[VolunteerRequest, int]:
    """Returns the stored request and the post's remaining capacity."""
    ensure_owner(identity, payload.volunteer_email)

    post_id = parse_id(payload.post_id)
    if post_id is not None:
        result = db.execute(
            update(Post)
            .where(Post.id == post_id, Post.volunteers_needed > 0)
            .values(volunteers_needed=Post.volunteers_needed - 1)
            .execution_options(synchronize_session=False)
        )
        claimed = result.rowcount == 1
    else:
        claimed = False

    if not claimed:
        db.rollback()
        logger.info("Request for post %s rejected: not found or no capacity", payload.post_id)
        raise HTTPException(status_code=400, detail="No volunteers needed or post not found.")

    req = VolunteerRequest(
        post_id=post_id,
        volunteer_email=normalize_email(payload.volunteer_email),
        details=payload.extra_fields(),
    )
    db.add(req)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.info("Duplicate request for post %s by %s", post_id, req.volunteer_email)
        raise HTTPException(status_code=409, detail="You already requested this post.")

    remaining = db.execute(select(Post.volunteers_needed).where(Post.id == post_id)).scalar_one()
    db.commit()
    db.refresh(req)
    logger.info("Request %s accepted for post %s (%d left)", req.id, post_id, remaining)
    return req, remaining


def list_requests_by_volunteer(db: Session, identity: Identity, email: str | None) -> list[VolunteerRequest]:
    ensure_owner(identity, email, "Forbidden - Unauthorized access")
    return (
        db.query(VolunteerRequest)
        .filter(VolunteerRequest.volunteer_email == normalize_email(email))
        .order_by(VolunteerRequest.created_at.asc())
        .all()
    )


def cancel_request(db: Session, identity: Identity, request_id: str) -> int:
    """
    Delete an owned request. The post's capacity is left as it is; a
    cancelled slot is not handed back.
    """
    rid = parse_id(request_id)
    req = db.query(VolunteerRequest).filter(VolunteerRequest.id == rid).first() if rid else None
    if req is None:
        return 0
    ensure_owner(identity, req.volunteer_email)

    db.delete(req)
    db.commit()
    logger.info("Request %s cancelled by %s", rid, identity.email)
    return 1
