"""Pydantic models describing API payloads."""
from datetime import date, datetime
from typing import Annotated, Literal, get_args

from pydantic import AfterValidator, BaseModel, Field, field_validator

ExpenseCategory = Literal[
    "Events",
    "Equipment",
    "Marketing",
    "Venue",
    "Food & Beverages",
    "Transportation",
    "Supplies",
    "Other",
]
EXPENSE_CATEGORIES: tuple[str, ...] = get_args(ExpenseCategory)

NotificationCategory = Literal["event", "meeting", "expense", "gallery"]
NOTIFICATION_CATEGORIES: tuple[str, ...] = get_args(NotificationCategory)


def _strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


# Form inputs arrive untrimmed; blank optional fields are stored as NULL.
RequiredText = Annotated[str, AfterValidator(_strip_required)]
OptionalText = Annotated[str | None, AfterValidator(_strip_or_none)]


# Member Schemas
class MemberCreate(BaseModel):
    """Schema for adding a member from the admin form."""

    name: RequiredText
    email: RequiredText
    phone_number: OptionalText = None
    academic_year: OptionalText = None
    department: OptionalText = None
    role: OptionalText = None
    status: Literal["active", "inactive"] = "active"


class MemberResponse(BaseModel):
    """Schema for member API response."""

    id: int
    name: str
    email: str
    phone_number: str | None = None
    academic_year: str | None = None
    department: str | None = None
    role: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Event / Meeting Schemas
class AnnouncementCreate(BaseModel):
    """Base schema for creating events and meetings."""

    title: RequiredText
    date: date
    time: str | None = Field(default=None, description="Start time as HH:MM (24h)")
    location: OptionalText = None
    description: OptionalText = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        value = _strip_or_none(value)
        if value is None:
            return None
        try:
            datetime.strptime(value, "%H:%M")
        except ValueError as exc:
            raise ValueError("time must be formatted as HH:MM") from exc
        return value


class EventCreate(AnnouncementCreate):
    """Schema for creating a new event."""


class MeetingCreate(AnnouncementCreate):
    """Schema for creating a new meeting."""


class AnnouncementResponse(BaseModel):
    """Schema for event and meeting API responses."""

    id: int
    title: str
    description: str | None = None
    location: str | None = None
    date: datetime
    time: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Dispatcher Schemas
class DeliveryResult(BaseModel):
    """Outcome of a single recipient send."""

    email: str
    status: Literal["sent", "failed"]
    message_id: str | None = Field(default=None, serialization_alias="messageId")
    error: str | None = None
    message: str


class DispatchSummary(BaseModel):
    """Aggregate counts for a dispatch batch."""

    total: int
    sent: int
    failed: int


class DispatchResult(BaseModel):
    """Result of a well-formed dispatch request, including partial failures."""

    success: bool = True
    results: list[DeliveryResult]
    summary: DispatchSummary


class NotificationDelivery(BaseModel):
    """How the member fan-out went after an event or meeting was saved."""

    status: Literal["skipped", "sent", "failed"]
    summary: DispatchSummary | None = None
    error: str | None = None


class EventCreatedResponse(BaseModel):
    """Schema returned after creating an event."""

    event: AnnouncementResponse
    notification: NotificationDelivery
    message: str


class MeetingCreatedResponse(BaseModel):
    """Schema returned after creating a meeting."""

    meeting: AnnouncementResponse
    notification: NotificationDelivery
    message: str


# Expense Schemas
class ExpenseCreate(BaseModel):
    """Schema for recording an expense."""

    item: RequiredText
    amount: float = Field(gt=0, allow_inf_nan=False)
    category: ExpenseCategory
    date: date


class ExpenseResponse(BaseModel):
    """Schema for expense API response."""

    id: int
    item: str
    amount: float
    category: str
    date: datetime
    created_at: datetime

    class Config:
        from_attributes = True


class ExpenseSummary(BaseModel):
    """Totals shown above the expense list."""

    total: float
    count: int
    average: int


# Gallery Schemas
class GalleryItemCreate(BaseModel):
    """Schema for adding a gallery image."""

    title: OptionalText = None
    image_url: RequiredText


class GalleryItemResponse(BaseModel):
    """Schema for gallery API response."""

    id: int
    title: str | None = None
    image_url: str
    created_at: datetime

    class Config:
        from_attributes = True


# Notification Schemas
class NotificationResponse(BaseModel):
    """Schema for in-app notification API response."""

    id: int
    title: str
    message: str
    type: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    """Notifications newest first with the unread badge count."""

    notifications: list[NotificationResponse]
    unread_count: int


# Session Schemas
class LoginRequest(BaseModel):
    password: str


class SessionResponse(BaseModel):
    """Admin session handed back after a successful login."""

    token: str
    created_at: datetime


class SessionStatus(BaseModel):
    authenticated: bool
    created_at: datetime | None = None
