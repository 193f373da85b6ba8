from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from volunteer_api.auth.identity import Identity
from volunteer_api.core.database import get_db
from volunteer_api.dependencies.auth import require_identity
from volunteer_api.schemas.common import DeleteResultOut, InsertedOut, UpdateResultOut
from volunteer_api.schemas.post import PostCreate, PostOut, PostUpdate
from volunteer_api.services import posts as posts_service

router = APIRouter(tags=["posts"])


@router.post("/posts", response_model=InsertedOut)
def create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    post = posts_service.create_post(db, identity, payload)
    return {"insertedId": post.id}


@router.get("/posts", response_model=list[PostOut])
def list_posts(db: Session = Depends(get_db)):
    return [PostOut.from_post(p) for p in posts_service.list_posts(db)]


@router.get("/volunteer-posts", response_model=list[PostOut])
def list_volunteer_posts(db: Session = Depends(get_db)):
    return [PostOut.from_post(p) for p in posts_service.list_posts(db)]


@router.get("/posts/{post_id}", response_model=PostOut)
def get_post(post_id: str, db: Session = Depends(get_db)):
    return PostOut.from_post(posts_service.get_post(db, post_id))


@router.get("/my-posts", response_model=list[PostOut])
def list_my_posts(
    email: str | None = Query(default=None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    return [PostOut.from_post(p) for p in posts_service.list_posts_by_organizer(db, identity, email)]


@router.put("/posts/{post_id}", response_model=UpdateResultOut)
def update_post(
    post_id: str,
    payload: PostUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    matched, modified = posts_service.update_post(db, identity, post_id, payload)
    return {"matchedCount": matched, "modifiedCount": modified}


@router.delete("/posts/{post_id}", response_model=DeleteResultOut)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    return {"deletedCount": posts_service.delete_post(db, identity, post_id)}
