# schemas.py
"""
Request payload schemas.

Routes validate incoming JSON with these models; a ``ValidationError`` is
turned into a 400 carrying the first error message (see ``app.py``).
Fields accept both snake_case and the camelCase names the dashboard sends.
"""
from datetime import date, datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _date_only(value):
    # "2024-05-01T00:00:00.000Z" -> "2024-05-01"
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


ClubDate = Annotated[date, BeforeValidator(_date_only)]

ExpenseCategory = Literal["court", "equipment", "refreshments", "other"]
ExpenseStatus = Literal["pending", "completed"]
BookingStatus = Literal["available", "booked", "pending", "cancelled"]
MemberStatus = Literal["active", "inactive"]


class ClubSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --------------------------------------------------
# AUTH
# --------------------------------------------------

class LoginSchema(ClubSchema):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def email_format(cls, value):
        value = value.strip().lower()
        if "@" not in value or "." not in value.split("@")[-1]:
            raise ValueError("Invalid email address")
        return value


class RefreshSchema(ClubSchema):
    refresh_token: str = Field(min_length=1)


class ChangePasswordSchema(ClubSchema):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


# --------------------------------------------------
# MEMBERS
# --------------------------------------------------

class MemberFields(ClubSchema):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[MemberStatus] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value):
        if not value.strip():
            raise ValueError("Name is required")
        return value.strip()

    @field_validator("email")
    @classmethod
    def email_format(cls, value):
        if value is None or not value.strip():
            return None
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value


class MemberCreate(MemberFields):
    password: Optional[str] = Field(default=None, min_length=6)


class MemberUpdate(MemberFields):
    # Logins are provisioned on create only
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value):
        if value is not None and not value.strip():
            raise ValueError("Name is required")
        return value.strip() if value else value


# --------------------------------------------------
# EXPENSES
# --------------------------------------------------

class ExpenseUpdate(ClubSchema):
    date: Optional[ClubDate] = None
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, ge=0)
    present_members: Optional[int] = Field(default=None, ge=1)
    selected_members: Optional[List[int]] = None
    paid_by: Optional[int] = None
    status: Optional[ExpenseStatus] = None
    court_booking_cost: Optional[float] = Field(default=None, ge=0)
    per_shuttle_cost: Optional[float] = Field(default=None, ge=0)
    shuttles_used: Optional[int] = Field(default=None, ge=0)

    @field_validator("selected_members")
    @classmethod
    def at_least_one_member(cls, value):
        if value is not None and len(value) == 0:
            raise ValueError("At least one member must be selected")
        return value


class ExpenseCreate(ExpenseUpdate):
    date: ClubDate
    category: ExpenseCategory
    description: str = Field(min_length=1)
    reduce_from_stock: bool = False


class MarkPaidSchema(ClubSchema):
    expense_id: int
    member_id: int


# --------------------------------------------------
# EQUIPMENT
# --------------------------------------------------

class EquipmentCreate(ClubSchema):
    date: ClubDate
    item_name: str = Field(min_length=1)
    description: Optional[str] = None
    amount: float = Field(ge=0)
    quantity_purchased: int = Field(ge=1)
    quantity_used: Optional[int] = Field(default=None, ge=0)
    selected_members: List[int] = Field(min_length=1)
    status: Optional[ExpenseStatus] = None


class UsageSchema(ClubSchema):
    quantity_used: int = Field(ge=0)


# --------------------------------------------------
# BOOKINGS / ATTENDANCE / FEES
# --------------------------------------------------

class BookingUpdate(ClubSchema):
    date: Optional[ClubDate] = None
    time: Optional[str] = Field(default=None, min_length=1)
    court: Optional[str] = Field(default=None, min_length=1)
    status: Optional[BookingStatus] = None
    players: Optional[int] = Field(default=None, ge=0)


class BookingCreate(BookingUpdate):
    date: ClubDate
    time: str = Field(min_length=1)
    court: str = Field(min_length=1)


class AttendanceSchema(ClubSchema):
    date: ClubDate
    member_id: Optional[int] = None
    is_present: bool


class JoiningFeeCreate(ClubSchema):
    member_id: int
    amount: float = Field(ge=0)
    date: ClubDate
    note: Optional[str] = None


# --------------------------------------------------
# REPORTS
# --------------------------------------------------

class Period(ClubSchema):
    start: ClubDate
    end: ClubDate


class ReportRequest(ClubSchema):
    type: Literal["financial", "attendance", "booking", "expense"]
    period: Period
