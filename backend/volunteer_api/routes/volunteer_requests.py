from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from volunteer_api.auth.identity import Identity
from volunteer_api.core.database import get_db
from volunteer_api.dependencies.auth import require_identity
from volunteer_api.schemas.common import DeleteResultOut
from volunteer_api.schemas.volunteer_request import (
    SubmitRequestOut,
    VolunteerRequestCreate,
    VolunteerRequestOut,
)
from volunteer_api.services import volunteer_requests as requests_service

router = APIRouter(tags=["requests"], dependencies=[Depends(require_identity)])


@router.post("/requests", response_model=SubmitRequestOut)
def submit_request(
    payload: VolunteerRequestCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    req, remaining = requests_service.submit_request(db, identity, payload)
    return {"success": True, "insertedId": req.id, "volunteersNeeded": remaining}


@router.get("/my-requests", response_model=list[VolunteerRequestOut])
def list_my_requests(
    email: str | None = Query(default=None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    return [
        VolunteerRequestOut.from_request(r)
        for r in requests_service.list_requests_by_volunteer(db, identity, email)
    ]


@router.delete("/requests/{request_id}", response_model=DeleteResultOut)
def cancel_request(
    request_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    return {"deletedCount": requests_service.cancel_request(db, identity, request_id)}
