from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from volunteer_api.auth.identity import Identity, normalize_email
from volunteer_api.models.post import Post
from volunteer_api.schemas.common import as_utc
from volunteer_api.schemas.post import PostCreate, PostUpdate
from volunteer_api.services.ids import parse_id

logger = logging.getLogger(__name__)


def ensure_owner(identity: Identity, email: str | None, message: str = "Forbidden - Email mismatch") -> None:
    if not identity.owns(email):
        logger.info("Ownership check failed for %s against %r", identity.to_debug_dict(), email)
        raise HTTPException(status_code=403, detail=message)


def find_post(db: Session, post_id: str | None) -> Post | None:
    pid = parse_id(post_id)
    if pid is None:
        return None
    return db.query(Post).filter(Post.id == pid).first()


def get_post(db: Session, post_id: str) -> Post:
    post = find_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def create_post(db: Session, identity: Identity, payload: PostCreate) -> Post:
    ensure_owner(identity, payload.organizer_email)

    post = Post(
        organizer_email=normalize_email(payload.organizer_email),
        deadline=as_utc(payload.deadline),
        volunteers_needed=payload.volunteers_needed,
        details=payload.extra_fields(),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Post %s created by %s", post.id, post.organizer_email)
    return post


def list_posts(db: Session) -> list[Post]:
    return db.query(Post).order_by(Post.deadline.asc(), Post.created_at.asc()).all()


def list_posts_by_organizer(db: Session, identity: Identity, email: str | None) -> list[Post]:
    ensure_owner(identity, email, "Forbidden - Unauthorized access")
    return db.query(Post).filter(Post.organizer_email == normalize_email(email)).all()


def update_post(db: Session, identity: Identity, post_id: str, payload: PostUpdate) -> tuple[int, int]:
    """
    Replace the supplied keys on an owned post.

    Returns (matched, modified) counts; an unknown id matches nothing
    rather than raising.
    """
    ensure_owner(identity, payload.organizer_email)

    post = find_post(db, post_id)
    if post is None:
        return 0, 0
    ensure_owner(identity, post.organizer_email)

    data = payload.model_dump(exclude_unset=True, include={"deadline", "volunteers_needed"})
    modified = False

    if "deadline" in data:
        if data["deadline"] is None:
            raise HTTPException(status_code=400, detail="deadline cannot be null")
        deadline = as_utc(data["deadline"])
        if as_utc(post.deadline) != deadline:
            post.deadline = deadline
            modified = True

    if "volunteers_needed" in data:
        if data["volunteers_needed"] is None:
            raise HTTPException(status_code=400, detail="volunteersNeeded cannot be null")
        if post.volunteers_needed != data["volunteers_needed"]:
            post.volunteers_needed = data["volunteers_needed"]
            modified = True

    extras = payload.extra_fields()
    if extras:
        details = dict(post.details or {})
        for k, v in extras.items():
            if k not in details or details[k] != v:
                details[k] = v
                modified = True
        # JSON columns only notice reassignment.
        post.details = details

    if modified:
        db.commit()
        logger.info("Post %s updated by %s", post.id, identity.email)
    return 1, int(modified)


def delete_post(db: Session, identity: Identity, post_id: str) -> int:
    post = find_post(db, post_id)
    if post is None:
        return 0
    ensure_owner(identity, post.organizer_email)

    db.delete(post)
    db.commit()
    logger.info("Post %s deleted by %s", post_id, identity.email)
    return 1
