"""Form validation for data entered on the pages."""

from family_finance.validation.forms import (
    FormValidationError,
    ValidationIssue,
    parse_fixed_expense_amount,
    validate_account_form,
    validate_fixed_expense_form,
    validate_project_form,
    validate_transaction_form,
    validate_worklog_form,
)

__all__ = [
    "FormValidationError",
    "ValidationIssue",
    "parse_fixed_expense_amount",
    "validate_account_form",
    "validate_fixed_expense_form",
    "validate_project_form",
    "validate_transaction_form",
    "validate_worklog_form",
]
