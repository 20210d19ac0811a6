"""Accounts page."""

from decimal import Decimal
from typing import Any, Mapping

from family_finance.i18n import Lang
from family_finance.models.records import Account
from family_finance.reports.balance import family_totals_by_currency
from family_finance.services.export import ExportFile, export_accounts
from family_finance.validation import validate_account_form
from family_finance.views.base import CrudView


class AccountsView(CrudView[Account]):
    """Account list in creation order, with family totals per currency."""

    table = "accounts"
    model = Account
    order_by = (("created_at", False),)

    def validate(self, form: Mapping[str, Any]) -> Account:
        return validate_account_form(form)

    def family_totals(self) -> dict[str, Decimal]:
        return family_totals_by_currency(self.items)

    def names_by_id(self) -> dict[str, str]:
        """Account id → name, for pages that show an account column."""
        return {acc.id: acc.name for acc in self.items if acc.id}

    def export(self, lang: Lang) -> ExportFile:
        result = export_accounts(self.items, lang)
        self._audit_logger.log_export(self.user_id, result.filename, result.sheet_count)
        return result
