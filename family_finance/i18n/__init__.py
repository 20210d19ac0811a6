"""Localization package."""

from family_finance.i18n.translations import (
    CATEGORY_OPTIONS,
    EN,
    FIXED_EXPENSE_NAME_EN,
    Lang,
    as_lang,
    fixed_expense_display_name,
    format_amount,
    subcategories_for,
    t,
)

__all__ = [
    "CATEGORY_OPTIONS",
    "EN",
    "FIXED_EXPENSE_NAME_EN",
    "Lang",
    "as_lang",
    "fixed_expense_display_name",
    "format_amount",
    "subcategories_for",
    "t",
]
