"""
Form Validation

DESIGN DECISION: Stored rows and form input are treated differently.

STORED ROWS are coerced (see models.records): whatever is in the table
gets displayed, with bad values read as 0 / None / "".

FORM INPUT is checked before anything is sent:
- Required fields must be present
- Fixed expense amounts must parse and be non-negative
- Everything else is coerced the same way stored rows are

A failed check raises FormValidationError listing every issue, with
messages written as Chinese UI keys so the page can translate them.
Nothing is sent to the backend when a check fails.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from family_finance.models.records import (
    Account,
    FixedExpense,
    Project,
    Transaction,
    WorkLog,
    coerce_date,
    coerce_time,
    hours_between,
)


class ValidationIssue(BaseModel):
    """A single problem found in submitted form data."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="UI message key (Chinese source text)"
    )


class FormValidationError(Exception):
    """Submitted form data failed validation."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(issue.message for issue in issues))

    @property
    def messages(self) -> list[str]:
        # Several fields can share one message
        seen: list[str] = []
        for issue in self.issues:
            if issue.message not in seen:
                seen.append(issue.message)
        return seen


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return "" if value is None else str(value).strip()


def _raise_if(issues: list[ValidationIssue]) -> None:
    if issues:
        raise FormValidationError(issues)


def validate_account_form(form: Mapping[str, Any]) -> Account:
    """Name and owner are required; numbers coerce to 0."""
    issues = []
    for field in ("name", "owner"):
        if not _text(form, field):
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message="账户名称和所有人不能为空",
            ))
    _raise_if(issues)
    return Account.model_validate(dict(form))


def validate_transaction_form(form: Mapping[str, Any]) -> Transaction:
    """A transaction needs a date; the amount keeps the sign it was typed with."""
    if coerce_date(form.get("date")) is None:
        raise FormValidationError([ValidationIssue(
            field="date",
            issue_type="missing",
            message="日期不能为空",
        )])
    return Transaction.model_validate(dict(form))


def parse_fixed_expense_amount(value: Any) -> Optional[Decimal]:
    """The amount as typed, 0 when blank, None when not a number or negative."""
    if isinstance(value, bool):
        return None
    text = "" if value is None else str(value).strip()
    if not text:
        return Decimal("0")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def validate_fixed_expense_form(form: Mapping[str, Any]) -> FixedExpense:
    """
    Name required, amount a number ≥ 0 (blank reads as 0), sort order
    defaults to 0.

    Currency falls back to CAD and the row stays active unless the form
    says otherwise.
    """
    issues = []
    if not _text(form, "name"):
        issues.append(ValidationIssue(
            field="name",
            issue_type="missing",
            message="名称不能为空",
        ))
    amount = parse_fixed_expense_amount(form.get("amount"))
    if amount is None:
        issues.append(ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message="金额必须是有效的正数",
        ))
    _raise_if(issues)

    data = dict(form)
    data["amount"] = amount
    if not _text(form, "sort_order"):
        data["sort_order"] = 0
    return FixedExpense.model_validate(data)


def validate_project_form(form: Mapping[str, Any]) -> Project:
    """Projects are free-form; empty dates become null."""
    return Project.model_validate(dict(form))


def validate_worklog_form(form: Mapping[str, Any]) -> WorkLog:
    """
    A work log needs a date.

    Hours are taken from the clock times unless the user typed a value;
    an empty project choice means no project.
    """
    if coerce_date(form.get("date")) is None:
        raise FormValidationError([ValidationIssue(
            field="date",
            issue_type="missing",
            message="日期不能为空",
        )])

    data = dict(form)
    if not _text(form, "hours"):
        data["hours"] = hours_between(
            coerce_time(form.get("start_time")),
            coerce_time(form.get("end_time")),
        )
    return WorkLog.model_validate(data)
