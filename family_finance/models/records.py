"""
Core Data Models for Family Finance

These models describe the rows stored in the hosted tables
(accounts, transactions, fixed_expenses, projects, worklogs).

DESIGN DECISION: Unlike form input, stored rows are never rejected.
Rows come back from the backend exactly as someone typed them, so the
models coerce bad values instead:
1. Missing or unparseable amounts become 0
2. Missing or unparseable dates become None
3. Missing text becomes ""
4. Empty foreign keys become None

Amounts keep their stored sign. Income is expected positive and expense
negative, but that is never enforced here.
"""

import datetime as dt
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# COERCION HELPERS
# =============================================================================

def coerce_decimal(value: Any) -> Decimal:
    """Parse a money-like value, treating anything unusable as zero."""
    if value is None or value == "" or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    try:
        result = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


def coerce_date(value: Any) -> Optional[date]:
    """Parse an ISO date (or datetime prefix), None when unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def coerce_time(value: Any) -> Optional[time]:
    """Parse HH:MM or HH:MM:SS, None when unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _to_payload_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    Transaction type.

    Stored values are the Chinese literals; English words are accepted
    when reading because later rows were entered in English.
    """
    INCOME = "收入"
    EXPENSE = "支出"
    TRANSFER = "转账"

    @classmethod
    def parse(cls, value: Any) -> Optional["TransactionType"]:
        """Recognize either spelling, None for anything else."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        return _TYPE_ALIASES.get(text) or _TYPE_ALIASES.get(text.lower())


_TYPE_ALIASES = {
    "收入": TransactionType.INCOME,
    "支出": TransactionType.EXPENSE,
    "转账": TransactionType.TRANSFER,
    "income": TransactionType.INCOME,
    "expense": TransactionType.EXPENSE,
    "transfer": TransactionType.TRANSFER,
}


# =============================================================================
# BASE RECORD
# =============================================================================

class Record(BaseModel):
    """
    Common fields of every stored row.

    `id` is kept as a string whatever the backend uses (uuid or bigint)
    so views can compare ids without caring about the column type.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator('id', 'user_id', mode='before')
    @classmethod
    def stringify_ids(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator('created_at', mode='before')
    @classmethod
    def lenient_timestamp(cls, v: Any) -> Optional[datetime]:
        if v is None or v == "":
            return None
        if isinstance(v, datetime):
            return v
        try:
            return datetime.fromisoformat(str(v).replace("Z", "+00:00"))
        except ValueError:
            return None

    def to_payload(self, user_id: Optional[str] = None) -> dict:
        """
        Convert to a row payload for insert/update.

        Server-managed columns (id, created_at) are never sent.
        """
        data = self.model_dump(exclude={"id", "created_at"})
        if user_id is not None:
            data["user_id"] = user_id
        elif data.get("user_id") is None:
            data.pop("user_id", None)
        return {key: _to_payload_value(value) for key, value in data.items()}


def _blank_if_none(v: Any) -> str:
    return "" if v is None else str(v)


# =============================================================================
# ACCOUNTS
# =============================================================================

class Account(Record):
    """
    A named money container.

    Balance accounting starts at `initial_date` when it is set;
    anything dated earlier is ignored by the balance reports.
    """
    name: str = ""
    category: str = ""
    owner: str = ""
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Manually maintained balance, added to initial_balance in family totals"
    )
    currency: str = "CAD"
    card_number: str = ""
    note: str = ""
    initial_balance: Decimal = Decimal("0")
    initial_date: Optional[date] = None

    @field_validator('name', 'category', 'owner', 'card_number', 'note', mode='before')
    @classmethod
    def text_fields(cls, v: Any) -> str:
        return _blank_if_none(v)

    @field_validator('currency', mode='before')
    @classmethod
    def default_currency(cls, v: Any) -> str:
        return str(v).strip().upper() if v else "CAD"

    @field_validator('balance', 'initial_balance', mode='before')
    @classmethod
    def money(cls, v: Any) -> Decimal:
        return coerce_decimal(v)

    @field_validator('initial_date', mode='before')
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[date]:
        return coerce_date(v)


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(Record):
    """
    A single dated money movement.

    `type` keeps whatever string was stored; use `kind` for the
    recognized TransactionType.
    """
    account_id: Optional[str] = None
    date: Optional[dt.date] = None
    type: str = TransactionType.EXPENSE.value
    category: str = ""
    subcategory: str = ""
    amount: Decimal = Decimal("0")
    currency: str = "CAD"
    note: str = ""

    @field_validator('account_id', mode='before')
    @classmethod
    def optional_account(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator('date', mode='before')
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[date]:
        return coerce_date(v)

    @field_validator('type', mode='before')
    @classmethod
    def type_text(cls, v: Any) -> str:
        if isinstance(v, TransactionType):
            return v.value
        return _blank_if_none(v)

    @field_validator('category', 'subcategory', 'note', mode='before')
    @classmethod
    def text_fields(cls, v: Any) -> str:
        return _blank_if_none(v)

    @field_validator('currency', mode='before')
    @classmethod
    def default_currency(cls, v: Any) -> str:
        return str(v).strip().upper() if v else "CAD"

    @field_validator('amount', mode='before')
    @classmethod
    def money(cls, v: Any) -> Decimal:
        return coerce_decimal(v)

    @property
    def kind(self) -> Optional[TransactionType]:
        return TransactionType.parse(self.type)

    @property
    def is_transfer(self) -> bool:
        return self.kind is TransactionType.TRANSFER

    @property
    def month(self) -> str:
        """YYYY-MM, or "" when the row has no date."""
        return self.date.strftime("%Y-%m") if self.date else ""


# =============================================================================
# FIXED EXPENSES
# =============================================================================

class FixedExpense(Record):
    """A recurring monthly obligation. `is_active=False` is a soft delete."""
    name: str = ""
    amount: Decimal = Decimal("0")
    currency: str = "CAD"
    note: str = ""
    icon: str = ""
    sort_order: int = 0
    is_active: bool = True

    @field_validator('name', 'note', 'icon', mode='before')
    @classmethod
    def text_fields(cls, v: Any) -> str:
        return _blank_if_none(v)

    @field_validator('currency', mode='before')
    @classmethod
    def default_currency(cls, v: Any) -> str:
        return str(v).strip().upper() if v else "CAD"

    @field_validator('amount', mode='before')
    @classmethod
    def money(cls, v: Any) -> Decimal:
        return coerce_decimal(v)

    @field_validator('sort_order', mode='before')
    @classmethod
    def lenient_int(cls, v: Any) -> int:
        try:
            return int(float(str(v).strip()))
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_validator('is_active', mode='before')
    @classmethod
    def active_default(cls, v: Any) -> bool:
        # Only an explicit false deactivates a row
        if isinstance(v, str):
            return v.strip().lower() not in ("false", "0", "no")
        return v is not False


# =============================================================================
# PROJECTS
# =============================================================================

class Project(Record):
    """A work project that work logs can point at."""
    name: str = ""
    location: str = ""
    expected_start_date: Optional[date] = None
    expected_end_date: Optional[date] = None
    actual_start_date: Optional[date] = None
    actual_end_date: Optional[date] = None
    note: str = ""

    @field_validator('name', 'location', 'note', mode='before')
    @classmethod
    def text_fields(cls, v: Any) -> str:
        return _blank_if_none(v)

    @field_validator(
        'expected_start_date', 'expected_end_date',
        'actual_start_date', 'actual_end_date',
        mode='before',
    )
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[date]:
        return coerce_date(v)


# =============================================================================
# WORK LOGS
# =============================================================================

def hours_between(start: Optional[time], end: Optional[time]) -> float:
    """
    Hours from start to end, rounded to 2 decimals.

    An end earlier than the start is read as finishing after midnight.
    """
    if start is None or end is None:
        return 0.0
    start_min = start.hour * 60 + start.minute + start.second / 60
    end_min = end.hour * 60 + end.minute + end.second / 60
    diff = end_min - start_min
    if diff < 0:
        diff += 24 * 60
    return round(diff / 60, 2)


class WorkLog(Record):
    """
    One day's work entry.

    `hours` is derived from the start/end time but the user may override
    it; `actual_hours`, when set, wins over both.
    """
    project_id: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    hours: float = 0.0
    actual_hours: Optional[float] = None
    location: str = ""
    note: str = ""
    is_holiday: bool = False

    @field_validator('project_id', mode='before')
    @classmethod
    def optional_project(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator('date', mode='before')
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[date]:
        return coerce_date(v)

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def lenient_time(cls, v: Any) -> Optional[time]:
        return coerce_time(v)

    @field_validator('hours', mode='before')
    @classmethod
    def lenient_hours(cls, v: Any) -> float:
        return float(coerce_decimal(v))

    @field_validator('actual_hours', mode='before')
    @classmethod
    def optional_hours(cls, v: Any) -> Optional[float]:
        if v is None or v == "":
            return None
        return float(coerce_decimal(v))

    @field_validator('location', 'note', mode='before')
    @classmethod
    def text_fields(cls, v: Any) -> str:
        return _blank_if_none(v)

    @field_validator('is_holiday', mode='before')
    @classmethod
    def holiday_flag(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes")
        return bool(v)

    @property
    def computed_hours(self) -> float:
        return hours_between(self.start_time, self.end_time)

    @property
    def effective_hours(self) -> float:
        """actual_hours, else stored hours, else hours from the clock times."""
        if self.actual_hours is not None:
            return self.actual_hours
        if self.hours:
            return self.hours
        return self.computed_hours


# =============================================================================
# SESSION
# =============================================================================

class UserSession(BaseModel):
    """The signed-in user as reported by the auth service."""

    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
    is_demo: bool = False
