"""Income/expense page."""

from typing import Any, Mapping, Optional

from family_finance.i18n import CATEGORY_OPTIONS, Lang, subcategories_for
from family_finance.models.records import Account, Transaction, TransactionType
from family_finance.services.export import ExportFile, export_transactions
from family_finance.validation import validate_transaction_form
from family_finance.views.base import CrudView, fetch_models


TRANSACTION_TYPES = [kind.value for kind in TransactionType]


def new_transaction_form(currency: str = "CAD") -> dict:
    """Blank form values for a new row."""
    return {
        "date": None,
        "type": TransactionType.EXPENSE.value,
        "category": "",
        "subcategory": "",
        "amount": "",
        "account_id": "",
        "currency": currency,
        "note": "",
    }


def change_category(form: dict, category: str) -> dict:
    """Pick a new category; the subcategory always starts over."""
    updated = dict(form)
    updated["category"] = category
    updated["subcategory"] = ""
    return updated


def form_from_transaction(tx: Transaction) -> dict:
    """Form values for editing an existing row."""
    return {
        "date": tx.date,
        "type": tx.type,
        "category": tx.category,
        "subcategory": tx.subcategory,
        "amount": tx.amount,
        "account_id": tx.account_id or "",
        "currency": tx.currency,
        "note": tx.note,
    }


class TransactionsView(CrudView[Transaction]):
    """Transactions newest first, with account names resolved for display."""

    table = "transactions"
    model = Transaction
    order_by = (("date", True),)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.accounts: list[Account] = []

    def validate(self, form: Mapping[str, Any]) -> Transaction:
        return validate_transaction_form(form)

    async def load_accounts(self) -> list[Account]:
        """Accounts for the picker and the account column."""
        self.accounts, _ = await fetch_models(
            self._storage, "accounts", self.user_id, Account, self._audit_logger
        )
        return self.accounts

    def account_name(self, account_id: Optional[str]) -> str:
        """Name of the account, or the raw id when it is not in the list."""
        if not account_id:
            return ""
        match = next((acc for acc in self.accounts if acc.id == account_id), None)
        return match.name if match else account_id

    @staticmethod
    def categories() -> list[str]:
        return list(CATEGORY_OPTIONS)

    @staticmethod
    def subcategories(category: str) -> list[str]:
        return subcategories_for(category)

    def export(self, lang: Lang) -> ExportFile:
        names = {acc.id: acc.name for acc in self.accounts if acc.id}
        result = export_transactions(self.items, names, lang)
        self._audit_logger.log_export(self.user_id, result.filename, result.sheet_count)
        return result
