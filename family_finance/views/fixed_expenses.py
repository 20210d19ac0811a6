"""
Fixed Expenses Page

Recurring monthly obligations: a management list (active and inactive
rows), a card with this month's active rows and totals per currency,
and a one-click template import.

DESIGN DECISION: Demo accounts never touch the table.
- They see a built-in list
- Their edits change only this view's in-memory list
- They cannot import the template

Deleting deactivates a row (is_active=False) so it can be restored;
"delete permanently" removes it.
"""

from decimal import Decimal
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from family_finance.audit import AuditLogger
from family_finance.models.records import FixedExpense
from family_finance.services.storage import RecordStorageInterface, StorageError
from family_finance.validation import validate_fixed_expense_form
from family_finance.views.base import CrudView


# =============================================================================
# BUILT-IN DATA
# =============================================================================

DEMO_FIXED_EXPENSES: list[dict] = [
    {"id": "1", "name": "房租", "amount": 1500.00, "note": "Demo 市中心公寓",
     "icon": "🏠", "currency": "CAD", "sort_order": 1, "is_active": True},
    {"id": "2", "name": "水电燃气", "amount": 120.00, "note": "Demo 公用事业费",
     "icon": "💡", "currency": "CAD", "sort_order": 2, "is_active": True},
    {"id": "3", "name": "网络/手机", "amount": 85.00, "note": "Demo 通讯费",
     "icon": "📱", "currency": "CAD", "sort_order": 3, "is_active": True},
    {"id": "4", "name": "车险", "amount": 180.00, "note": "Demo 汽车保险",
     "icon": "🚗", "currency": "CAD", "sort_order": 4, "is_active": True},
    {"id": "5", "name": "健身房", "amount": 60.00, "note": "Demo 会员费",
     "icon": "💪", "currency": "CAD", "sort_order": 5, "is_active": True},
]

TEMPLATE_FIXED_EXPENSES: list[dict] = [
    {"icon": "🏠", "name": "房贷", "amount": 4482.28, "note": "（每月28号）", "sort_order": 10},
    {"icon": "🚗", "name": "汽车保险", "amount": 497.13, "note": "（每月23号）", "sort_order": 20},
    {"icon": "🏡", "name": "房屋保险", "amount": 208.02, "note": "（每月23号）", "sort_order": 30},
    {"icon": "🚘", "name": "车 lease", "amount": 817.22, "note": "（每月10号）", "sort_order": 40},
    {"icon": "📅", "name": "地税", "amount": 1560, "note": "（4月1次，6月25号）", "sort_order": 50},
    {"icon": "💡", "name": "水电", "amount": 130, "note": "（每月20号）≈", "sort_order": 60},
    {"icon": "🔥", "name": "煤气", "amount": 130, "note": "（每月20号）≈", "sort_order": 70},
    {"icon": "🌐", "name": "宽带", "amount": 74, "note": "（每月5号，LJS信用卡）", "sort_order": 80},
    {"icon": "📱", "name": "电话费", "amount": 169.47, "note": "（每月25号，JH信用卡）", "sort_order": 90},
]

TEMPLATE_CONFLICT_COLUMNS = ("user_id", "name")


# =============================================================================
# IMPORT ERRORS
# =============================================================================

MISSING_UNIQUE_INDEX_HINT = "⚠️ 缺少唯一索引 (user_id, name)。请在 Supabase 中为 fixed_expenses 创建唯一索引。"
RLS_POLICY_HINT = "⚠️ RLS 策略未配置。请在 Supabase 中为 fixed_expenses 配置行级安全策略。"

_UNIQUE_INDEX_MARKERS = ("no unique or exclusion constraint", "there is no unique")
_RLS_MARKERS = ("violates row-level security", "policy")


def classify_import_error(message: str) -> Optional[str]:
    """Setup hint for a known import failure, None for anything else."""
    text = message or ""
    if any(marker in text for marker in _UNIQUE_INDEX_MARKERS):
        return MISSING_UNIQUE_INDEX_HINT
    if any(marker in text for marker in _RLS_MARKERS):
        return RLS_POLICY_HINT
    return None


class DemoModeError(Exception):
    """The action is not available to demo accounts. The message is a UI key."""
    pass


class ImportResult(BaseModel):
    """Outcome of a template import."""

    imported: int = 0
    error_message: Optional[str] = None
    hint: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_message is None


class MonthlyCard(BaseModel):
    """This month's active fixed expenses."""

    items: list[FixedExpense]
    totals: dict[str, Decimal]


def totals_by_currency(expenses: list[FixedExpense]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for exp in expenses:
        totals[exp.currency] = totals.get(exp.currency, Decimal("0")) + exp.amount
    return totals


def _sort_key(exp: FixedExpense):
    # Numeric ids sort numerically, others after them as text
    id_text = exp.id or ""
    return (exp.sort_order, not id_text.isdigit(), int(id_text) if id_text.isdigit() else 0, id_text)


# =============================================================================
# VIEW
# =============================================================================

class FixedExpensesView(CrudView[FixedExpense]):
    """Fixed expense management, backed by the table or by the demo list."""

    table = "fixed_expenses"
    model = FixedExpense
    order_by = (("sort_order", False), ("id", False))

    def __init__(
        self,
        storage: RecordStorageInterface,
        user_id: str,
        audit_logger: Optional[AuditLogger] = None,
        is_demo: bool = False,
    ):
        super().__init__(storage, user_id, audit_logger)
        self.is_demo = is_demo
        self._demo_items = [FixedExpense.model_validate(row) for row in DEMO_FIXED_EXPENSES]

    def validate(self, form: Mapping[str, Any]) -> FixedExpense:
        return validate_fixed_expense_form(form)

    async def load(self) -> list[FixedExpense]:
        if self.is_demo:
            self.items = sorted(self._demo_items, key=_sort_key)
            self.load_error = None
            return self.items
        return await super().load()

    def monthly_card(self) -> MonthlyCard:
        """Active rows only, in management order, with totals per currency."""
        active = [exp for exp in self.items if exp.is_active]
        return MonthlyCard(items=active, totals=totals_by_currency(active))

    # -- writes -----------------------------------------------------------

    async def save(
        self,
        form: Mapping[str, Any],
        editing_id: Optional[str] = None,
    ) -> FixedExpense:
        if not self.is_demo:
            return await super().save(form, editing_id)

        record = self.validate(form)
        if editing_id:
            record = record.model_copy(update={"id": str(editing_id)})
            self._demo_items = [
                record if exp.id == str(editing_id) else exp for exp in self._demo_items
            ]
        else:
            next_id = max((int(exp.id) for exp in self._demo_items if exp.id and exp.id.isdigit()), default=0) + 1
            record = record.model_copy(update={"id": str(next_id)})
            self._demo_items.append(record)
        await self.load()
        return record

    async def _set_active(self, record_id: str, active: bool) -> None:
        if self.is_demo:
            self._demo_items = [
                exp.model_copy(update={"is_active": active}) if exp.id == str(record_id) else exp
                for exp in self._demo_items
            ]
            await self.load()
            return

        try:
            await self._storage.update_record(
                self.table, str(record_id), self.user_id, {"is_active": active}
            )
        except StorageError as e:
            self._audit_logger.log_save_failed(
                self.table, self.user_id, str(e), record_id=str(record_id)
            )
            raise

        if active:
            self._audit_logger.log_record_restored(self.table, str(record_id), self.user_id)
        else:
            self._audit_logger.log_record_soft_deleted(self.table, str(record_id), self.user_id)
        await self.load()

    async def deactivate(self, record_id: str) -> None:
        """Soft delete: the row stays in the list and can be restored."""
        await self._set_active(record_id, False)

    async def restore(self, record_id: str) -> None:
        await self._set_active(record_id, True)

    async def delete(self, record_id: str) -> bool:
        """Permanent delete."""
        if not self.is_demo:
            return await super().delete(record_id)
        before = len(self._demo_items)
        self._demo_items = [exp for exp in self._demo_items if exp.id != str(record_id)]
        await self.load()
        return len(self._demo_items) < before

    # -- template import --------------------------------------------------

    def import_needs_confirmation(self) -> bool:
        """Importing over existing active rows updates them; ask first."""
        return any(exp.is_active for exp in self.items)

    def template_payloads(self) -> list[dict]:
        return [
            {**item, "currency": "CAD", "is_active": True, "user_id": self.user_id}
            for item in TEMPLATE_FIXED_EXPENSES
        ]

    async def import_template(self) -> ImportResult:
        """
        Upsert the template rows keyed on (user_id, name).

        Backend failures are returned, not raised, together with a setup
        hint when the failure is a known one. There is no rollback.

        Raises:
            DemoModeError: For demo accounts
        """
        if self.is_demo:
            raise DemoModeError("（演示模式）演示用户无法导入模板")

        payloads = self.template_payloads()
        try:
            await self._storage.upsert_records(self.table, payloads, TEMPLATE_CONFLICT_COLUMNS)
        except StorageError as e:
            message = str(e)
            hint = classify_import_error(message)
            self._audit_logger.log_template_import_failed(self.user_id, hint or "", message)
            return ImportResult(error_message=message, hint=hint)

        self._audit_logger.log_template_imported(self.user_id, len(payloads))
        await self.load()
        return ImportResult(imported=len(payloads))
