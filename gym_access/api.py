from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from starlette.concurrency import run_in_threadpool
from typing import Optional
from .access import record_access, list_logs, allowed_today
from .auth import SESSION_COOKIE, Identity, authenticate_user, issue_token, require_api_key, require_roles
from .realtime import broadcaster
from .settings import settings

router = APIRouter(prefix="/api/v1")

class LoginRequest(BaseModel):
    email: str
    password: str

class AccessRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rfid_card_number: Optional[str] = None
    device_id: Optional[str] = None

@router.post("/auth/login")
def login(req: LoginRequest, response: Response):
    user = authenticate_user(req.email, req.password)
    token = issue_token(user)
    response.set_cookie(SESSION_COOKIE, token, max_age=settings.SESSION_MAX_AGE, httponly=True, samesite="lax")
    return {"access_token": token, "token_type": "bearer", "user": {"id": user.id, "name": user.name, "role": user.role}}

@router.post("/rfid/access", dependencies=[Depends(require_api_key)])
async def rfid_access(req: AccessRequest):
    if not req.rfid_card_number or not req.device_id:
        raise HTTPException(400, "Missing required fields")
    # sync SQLAlchemy work stays off the loop so open streams keep flowing
    event = await run_in_threadpool(record_access, req.rfid_card_number, req.device_id)
    await broadcaster.broadcast(event.payload())
    return {
        "status": event.type,
        "message": event.message,
        "timestamp": event.timestamp.isoformat(),
    }

@router.get("/rfid/logs")
def rfid_logs(
    user_id: Optional[str] = Query(None, alias="userId"),
    day: Optional[date] = Query(None, alias="date"),
    status: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    user: Identity = Depends(require_roles(settings.LOG_ROLES)),
):
    return list_logs(user_id=user_id, day=day, status=status, limit=limit)

@router.get("/access/stats/today")
def access_stats_today(user: Identity = Depends(require_roles(settings.LOG_ROLES))):
    return {"count": allowed_today()}
