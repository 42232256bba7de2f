from enum import Enum
from typing import Optional, List, Dict
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # JSON uses camelCase (merchantId, bookingCost...), Python uses snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Role(str, Enum):
    CUSTOMER = "Customer"
    MERCHANT = "Merchant"
    ADMIN = "Admin"


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"


# Pending is the only state with outgoing edges
BOOKING_TRANSITIONS: Dict[BookingStatus, frozenset] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED}),
    BookingStatus.CONFIRMED: frozenset(),
    BookingStatus.REJECTED: frozenset(),
}


class Service(CamelModel):
    id: str
    name: str
    price: float


class Merchant(CamelModel):
    id: str
    name: str
    category: str
    description: str = ""
    image_url: str = ""
    services: List[Service] = Field(default_factory=list)
    operating_hours: Dict[str, str] = Field(default_factory=dict)


class User(CamelModel):
    id: str
    name: str
    role: Role
    merchant_id: Optional[str] = None


class Booking(CamelModel):
    id: str
    merchant_id: str
    # Value snapshot taken at booking time, never the live catalog entry
    merchant: Merchant
    customer_id: Optional[str] = None
    date: str
    time: str
    guests: int
    notes: str = ""
    status: BookingStatus = BookingStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    service_name: str
    booking_cost: float
    commission: float
    merchant_payout: float


class FinancialSummary(CamelModel):
    total_revenue: float = 0.0
    total_commission: float = 0.0
    total_payout: float = 0.0
    confirmed_bookings: int = 0
    # The Confirmed bookings behind the totals, in input order
    transactions: List[Booking] = Field(default_factory=list)
