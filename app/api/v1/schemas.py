from datetime import date
from typing import Any

from pydantic import BaseModel, Field


class ChatRequestSchema(BaseModel):
    question: str = Field(min_length=1)


class ConfirmActionRequestSchema(BaseModel):
    confirm: bool


class PendingBookingSchema(BaseModel):
    date: date
    timeSlot: str
    resourceTypeId: int
    resourceTypeName: str


class ChatResponseSchema(BaseModel):
    answer: str
    userName: str | None = None
    pendingBooking: PendingBookingSchema | None = None
    awaitingConfirmation: bool = False
    actionType: str | None = None


class BookingSchema(BaseModel):
    id: int
    date: date
    timeSlot: str
    userId: str
    resourceTypeId: int
    resourceTypeName: str
    resourceId: int


class ResourceSchema(BaseModel):
    id: int
    name: str
    resourceTypeId: int


class ErrorSchema(BaseModel):
    error: str
    details: Any | None = None
