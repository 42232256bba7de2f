from pydantic import Field
from typing import Optional, List, Literal

from marketplace.models.domain import CamelModel

# --- Incoming Request Models ---

class LoginRequest(CamelModel):
    user_id: str

class ServiceIn(CamelModel):
    # Id is optional so the catalog editor can add new entries
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)

class UpdateServicesRequest(CamelModel):
    services: List[ServiceIn]

class CreateBookingRequest(CamelModel):
    merchant_id: str
    date: str = Field(..., description="YYYY-MM-DD")
    time: str = Field(..., description="HH:MM")
    guests: int = Field(1, ge=1)
    notes: str = ""
    service_ids: List[str] = Field(..., min_length=1)

class UpdateStatusRequest(CamelModel):
    # Pending is never a valid target
    status: Literal["Confirmed", "Rejected"]
