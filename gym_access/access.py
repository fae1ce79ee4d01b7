import logging, uuid
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import func, select
from .db import SessionLocal
from .events import AccessEvent, AccessUser
from .models import AccessLog, User

log = logging.getLogger("access")

UNKNOWN_CARD = "RFID card not registered"
MEMBERSHIP_EXPIRED = "Membership expired"
ACCESS_GRANTED = "Access granted"

def record_access(card_number: str, device_id: str, now: Optional[datetime] = None) -> AccessEvent:
    """Decide access for a scanned card, persist the log row and build the event to push."""
    now = now or datetime.now()
    with SessionLocal() as s:
        user = s.scalars(select(User).where(User.rfid_card_number == card_number)).first()
        status, reason = "denied", UNKNOWN_CARD
        if user:
            if user.membership_expiry and user.membership_expiry > now:
                status, reason = "allowed", None
            else:
                status, reason = "warning", MEMBERSHIP_EXPIRED
                user.membership_status = "expired"
            user.last_check_in = now
        s.add(AccessLog(
            id=str(uuid.uuid4()),
            user_id=user.id if user else "unknown",
            timestamp=now,
            status=status,
            reason=reason,
            device_id=device_id,
        ))
        s.commit()
        access_user = None
        if user:
            s.refresh(user)
            access_user = AccessUser(
                id=user.id,
                name=user.name,
                email=user.email,
                membership_type=user.membership_type,
                membership_expiry=user.membership_expiry,
                membership_status=user.membership_status,
            )
    log.info("Card %s at %s: %s", card_number, device_id, status)
    return AccessEvent(
        type=status,
        message=reason or ACCESS_GRANTED,
        user=access_user,
        card_number=card_number,
        device_id=device_id,
        timestamp=now,
    )

def list_logs(user_id: Optional[str] = None, day: Optional[date] = None,
              status: Optional[str] = None, limit: int = 50) -> List[Dict[str, Any]]:
    with SessionLocal() as s:
        stmt = select(AccessLog, User).outerjoin(User, User.id == AccessLog.user_id)
        if user_id:
            stmt = stmt.where(AccessLog.user_id == user_id)
        if day:
            start = datetime.combine(day, time.min)
            stmt = stmt.where(AccessLog.timestamp >= start, AccessLog.timestamp < start + timedelta(days=1))
        if status:
            stmt = stmt.where(AccessLog.status == status)
        stmt = stmt.order_by(AccessLog.timestamp.desc()).limit(limit)
        out = []
        for entry, user in s.execute(stmt).all():
            out.append({
                "id": entry.id,
                "userId": entry.user_id,
                "timestamp": entry.timestamp,
                "status": entry.status,
                "reason": entry.reason,
                "deviceId": entry.device_id,
                "processedBy": entry.processed_by,
                "user": {
                    "id": user.id,
                    "name": user.name,
                    "email": user.email,
                    "membershipType": user.membership_type,
                    "membershipStatus": user.membership_status,
                } if user else None,
            })
        return out

def allowed_today(now: Optional[datetime] = None) -> int:
    start = datetime.combine((now or datetime.now()).date(), time.min)
    with SessionLocal() as s:
        stmt = select(func.count(AccessLog.id)).where(
            AccessLog.status == "allowed",
            AccessLog.timestamp >= start,
            AccessLog.timestamp < start + timedelta(days=1),
        )
        return s.scalar(stmt)
