"""Payloads pushed over the access event stream.

Field names are camelCase on the wire; the dashboard reads them as-is.
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

AccessStatus = Literal["allowed", "denied", "warning"]

class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

class ConnectedEvent(_WireModel):
    event: Literal["connected"] = "connected"

class AccessUser(_WireModel):
    id: str
    name: Optional[str] = None
    email: str
    membership_type: Optional[str] = None
    membership_expiry: Optional[datetime] = None
    membership_status: Optional[str] = None

class AccessEvent(_WireModel):
    type: AccessStatus
    message: str
    user: Optional[AccessUser] = None
    card_number: str
    device_id: str
    timestamp: datetime
