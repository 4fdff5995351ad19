"""Scheduling schemas"""

from pydantic import BaseModel, field_validator

from ...shared.clock import parse_date
from ..clients.schemas import Appointment, AppointmentFields


class AppointmentCreate(AppointmentFields):
    """New appointment for one of the current user's clients"""

    clientId: str = ""
    date: str

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parsed = parse_date(v)
        if parsed is None:
            raise ValueError("Date must use the YYYY-MM-DD format")
        return parsed.isoformat()


class AvailabilityResponse(BaseModel):
    date: str
    duration: int
    slots: list[str]


class CalendarEntry(BaseModel):
    clientId: str
    clientName: str
    appointment: Appointment


class ScheduledAppointment(BaseModel):
    clientId: str
    appointment: Appointment
