"""
Pydantic request models for the API.
"""
from pydantic import BaseModel
from typing import Optional


class LogisticsIn(BaseModel):
    """Move logistics as submitted by the quote builder."""
    date: str = ""
    time_window: str = "08:00 - 10:00"
    crew_size: int = 3
    stairs_pickup: int = 0
    stairs_dropoff: int = 0
    walk_distance: str = "Medium"
    packing_type: str = "None"
    heavy_items_count: int = 0
    mileage: float = 10.0
    is_same_day: bool = False
    is_weekend: bool = False
    is_month_end: bool = False
    use_credit_card: bool = False
    estimated_hours: float = 4.0
    duration_days: int = 1
    timeline_notes: str = ""
    pickup_address: str = "TBD"
    dropoff_address: str = "TBD"
    elevator: bool = False
    truck_size: str = "26ft Box"
    timeline_view: str = "Day"


class JobCreate(BaseModel):
    """Accept a tier and save the quote as a lead. The quote is re-priced server-side."""
    logistics: LogisticsIn
    tier: str = "recommended"
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: str = ""
    tip: float = 0


class StatusUpdate(BaseModel):
    status: str


class CrewAssign(BaseModel):
    crew_id: Optional[str] = None
    start_time: Optional[str] = None


class EmployeeCreate(BaseModel):
    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    role: str = "mover"
    hire_date: str = ""


class CrewCreate(BaseModel):
    name: str = "New Crew"


class ReceiptCreate(BaseModel):
    title: str = "Manual Receipt"
    amount: float = 0
    category: str = "Fuel"
    image_url: str = ""
    uploaded_by: str = "System"


class ClockRequest(BaseModel):
    mileage: Optional[float] = None
    job_id: Optional[str] = None
