"""
Streamlit Frontend for Family Finance

The household's daily entry point: accounts, income/expense records,
fixed monthly costs, projects and work hours, plus the monthly reports.

DESIGN PRINCIPLES:
1. Chinese first, English on request (sidebar toggle)
2. Every page re-fetches on every run; nothing is cached between runs
3. Backend errors are shown verbatim after a localized label
4. Nothing is written without pressing a Save/Delete button

One FinanceApp is kept per browser session in st.session_state, since
the Supabase auth session belongs to the client that signed in.
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st

from family_finance.audit import configure_logging
from family_finance.config import get_settings
from family_finance.i18n import (
    Lang,
    fixed_expense_display_name,
    format_amount,
    t,
)
from family_finance.models.records import TransactionType
from family_finance.orchestrator import DEFAULT_ROUTE, NAV_ROUTES, FinanceApp, create_app_components
from family_finance.reports import HolidayFilter
from family_finance.services.auth import AuthError
from family_finance.services.export import ExportFile
from family_finance.services.storage import StorageError
from family_finance.validation import FormValidationError
from family_finance.views import DemoModeError, change_category, form_from_transaction, new_transaction_form


# Page configuration
st.set_page_config(
    page_title="Family Finance",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .card {
        padding: 16px;
        background-color: #f8f9fa;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
    .big-number {
        font-size: 1.8em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


ACCOUNT_CATEGORIES = ["活期账户", "信用账户", "现金账户", "社保账户"]
CURRENCIES = ["CAD", "USD", "CNY"]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_app() -> FinanceApp:
    """Get or create this browser session's FinanceApp."""
    if "finance_app" not in st.session_state:
        app, _ = create_app_components(use_storage=True)
        st.session_state.finance_app = app
    return st.session_state.finance_app


def current_lang() -> Lang:
    if "lang" not in st.session_state:
        st.session_state.lang = get_settings().app.default_language
    return Lang(st.session_state.lang)


def show_failure(label_key: str, error: Exception, lang: Lang) -> None:
    """Localized label followed by the raw message."""
    if isinstance(error, FormValidationError):
        for message in error.messages:
            st.error(t(message, lang))
    else:
        st.error(t(label_key, lang) + str(error))


def download_button(export: ExportFile, lang: Lang, key: str) -> None:
    st.download_button(
        t("导出为Excel", lang),
        data=export.content,
        file_name=export.filename,
        mime=export.mime_type,
        key=key,
    )


def money(value) -> str:
    return format_amount(value)


def main():
    """Main application entry point."""
    configure_logging(get_settings().app.log_level)
    app = get_app()
    lang = current_lang()

    # Sidebar: language first, it applies to the login page too
    st.sidebar.title("💰 " + t("欢迎使用家庭财务App", lang))
    choice = st.sidebar.radio(
        t("语言", lang),
        [Lang.ZH.value, Lang.EN.value],
        index=0 if lang is Lang.ZH else 1,
        format_func=lambda code: "中文" if code == Lang.ZH.value else "English",
        horizontal=True,
    )
    if choice != lang.value:
        st.session_state.lang = choice
        st.rerun()

    session = app.restore_session()
    if session is None:
        render_login_page(app, lang)
        return

    st.sidebar.markdown("---")
    routes = [route for route, _ in NAV_ROUTES] + ["settings"]
    labels = dict(NAV_ROUTES, settings="设置")
    page = st.sidebar.radio(
        t("导航", lang),
        routes,
        index=routes.index(st.session_state.get("route", DEFAULT_ROUTE)),
        format_func=lambda route: t(labels[route], lang),
    )
    st.session_state.route = page

    st.sidebar.markdown("---")
    if session.email:
        st.sidebar.caption(session.email)
    if not app.is_offline and st.sidebar.button(t("退出登录", lang)):
        app.sign_out()
        st.rerun()

    # Route to appropriate page
    if page == "accounts":
        render_accounts_page(app, lang)
    elif page == "fixed-expenses":
        render_fixed_expenses_page(app, lang)
    elif page == "transactions":
        render_transactions_page(app, lang)
    elif page == "summary":
        render_summary_page(app, lang)
    elif page == "account-overview":
        render_account_overview_page(app, lang)
    elif page == "worklog":
        render_worklog_page(app, lang)
    elif page == "balance":
        render_balance_page(app, lang)
    elif page == "projects":
        render_projects_page(app, lang)
    elif page == "settings":
        render_settings_page(lang)


# =============================================================================
# LOGIN
# =============================================================================

def render_login_page(app: FinanceApp, lang: Lang):
    """Email/password sign-in and password reset."""
    st.title(t("登录账户", lang))

    with st.form("login"):
        email = st.text_input(t("邮箱", lang))
        password = st.text_input(t("密码", lang), type="password")
        submitted = st.form_submit_button(t("登录", lang), type="primary")

    if submitted:
        try:
            app.sign_in(email, password)
            st.session_state.route = DEFAULT_ROUTE
            st.rerun()
        except AuthError as e:
            st.error(t(str(e), lang))

    if st.button(t("忘记密码？点我发送重置链接", lang)):
        try:
            st.success(t(app.request_password_reset(email), lang))
        except AuthError as e:
            st.error(t(str(e), lang))


# =============================================================================
# ACCOUNTS
# =============================================================================

def render_fixed_expense_card(app: FinanceApp, lang: Lang):
    """This month's active fixed expenses with totals per currency."""
    view = app.fixed_expenses()
    run_async(view.load())
    card = view.monthly_card()

    st.subheader(t("当前月份固定花销", lang))
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)
    if not card.items:
        st.info(t("暂无数据", lang))
        return
    for exp in card.items:
        st.markdown(
            f"{exp.icon} **{fixed_expense_display_name(exp.name, lang)}** "
            f"{money(exp.amount)} {exp.currency} {exp.note}"
        )
    for currency, total in card.totals.items():
        st.markdown(f"**{t('合计', lang)}：** {money(total)} {currency}")


def render_accounts_page(app: FinanceApp, lang: Lang):
    """Render the accounts page."""
    st.title(t("家庭账户管理", lang))
    view = app.accounts()
    run_async(view.load())
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)

    col1, col2 = st.columns(2)
    with col1:
        st.subheader(t("家庭账户总余额", lang))
        for currency, total in view.family_totals().items():
            st.markdown(f'<div class="big-number">{money(total)} {currency}</div>', unsafe_allow_html=True)
    with col2:
        render_fixed_expense_card(app, lang)

    st.markdown("---")
    if view.items:
        st.dataframe(
            [
                {
                    t("账户名称", lang): acc.name,
                    t("分类", lang): t(acc.category, lang),
                    t("所有人", lang): acc.owner,
                    t("余额", lang): money(acc.balance),
                    t("币种", lang): acc.currency,
                    t("卡号", lang): acc.card_number,
                    t("初始余额", lang): money(acc.initial_balance),
                    t("起始日期", lang): acc.initial_date.isoformat() if acc.initial_date else "",
                    t("备注", lang): acc.note,
                }
                for acc in view.items
            ],
            use_container_width=True,
        )
        download_button(view.export(lang), lang, "export_accounts")
    else:
        st.info(t("暂无记录，请先新增", lang))

    editing = pick_record(view.items, lambda acc: f"{acc.name} ({acc.owner})", lang, "account_edit")

    with st.form("account_form", clear_on_submit=editing is None):
        st.subheader(t("编辑", lang) if editing else t("添加账户", lang))
        name = st.text_input(t("账户名称", lang), value=editing.name if editing else "")
        category_options = ACCOUNT_CATEGORIES + (
            [editing.category] if editing and editing.category and editing.category not in ACCOUNT_CATEGORIES else []
        )
        category = st.selectbox(
            t("分类", lang),
            [""] + category_options,
            index=([""] + category_options).index(editing.category) if editing else 0,
            format_func=lambda c: t(c, lang),
        )
        owner = st.text_input(t("所有人", lang), value=editing.owner if editing else "")
        balance = st.number_input(t("余额", lang), value=float(editing.balance) if editing else 0.0, step=0.01, format="%.2f")
        currency = st.selectbox(t("币种", lang), CURRENCIES, index=_index_of(CURRENCIES, editing.currency if editing else None))
        card_number = st.text_input(t("卡号", lang), value=editing.card_number if editing else "")
        initial_balance = st.number_input(
            t("初始余额", lang), value=float(editing.initial_balance) if editing else 0.0, step=0.01, format="%.2f"
        )
        initial_date = st.date_input(t("起始日期", lang), value=editing.initial_date if editing else None)
        note = st.text_input(t("备注", lang), value=editing.note if editing else "")
        submitted = st.form_submit_button(t("保存", lang), type="primary")

    if submitted:
        form = {
            "name": name,
            "category": category,
            "owner": owner,
            "balance": Decimal(str(balance)),
            "currency": currency,
            "card_number": card_number,
            "note": note,
            "initial_balance": Decimal(str(initial_balance)),
            "initial_date": initial_date,
        }
        try:
            run_async(view.save(form, editing_id=editing.id if editing else None))
            st.success(t("保存成功", lang))
            st.rerun()
        except (FormValidationError, StorageError) as e:
            show_failure("保存失败：", e, lang)

    if editing:
        render_delete_button(view, editing.id, "确定要删除这个账户吗？", lang, "account_delete")


# =============================================================================
# SHARED FORM HELPERS
# =============================================================================

def _index_of(options: list, value) -> int:
    return options.index(value) if value in options else 0


def pick_record(items, label, lang: Lang, key: str):
    """Selectbox of existing rows; None means 'new record'."""
    if not items:
        return None
    ids = [None] + [item.id for item in items]
    by_id = {item.id: item for item in items}
    chosen = st.selectbox(
        t("选择要编辑的记录", lang),
        ids,
        format_func=lambda rid: t("新增", lang) if rid is None else label(by_id[rid]),
        key=key,
    )
    return by_id.get(chosen)


def render_delete_button(view, record_id: str, confirm_key: str, lang: Lang, key: str):
    confirmed = st.checkbox(t(confirm_key, lang), key=f"{key}_confirm")
    if st.button(t("删除", lang), key=key, disabled=not confirmed):
        try:
            run_async(view.delete(record_id))
            st.success(t("删除成功", lang))
            st.rerun()
        except StorageError as e:
            show_failure("删除失败：", e, lang)


# =============================================================================
# FIXED EXPENSES
# =============================================================================

def render_fixed_expenses_page(app: FinanceApp, lang: Lang):
    """Render the fixed expense management page."""
    st.title(t("固定花销管理", lang))
    view = app.fixed_expenses()
    run_async(view.load())
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)

    prefix = "（演示模式）" if view.is_demo else ""

    # Template import
    with st.expander(t("一键导入模板", lang)):
        needs_confirm = view.import_needs_confirmation()
        confirmed = True
        if needs_confirm:
            confirmed = st.checkbox(t("表内已有数据，是否按模板覆盖/更新？", lang))
        if st.button(t("一键导入模板", lang), disabled=not confirmed):
            try:
                result = run_async(view.import_template())
            except DemoModeError as e:
                st.warning(t(str(e), lang))
            else:
                if result.ok:
                    st.success(t("导入成功", lang))
                else:
                    st.error(t("导入失败：", lang) + (result.error_message or ""))
                    if result.hint:
                        st.warning(t(result.hint, lang))

    # Management list
    if view.items:
        for exp in view.items:
            cols = st.columns([4, 2, 1, 1, 1])
            status = "" if exp.is_active else f" ({t('已停用', lang)})"
            cols[0].markdown(
                f"{exp.icon} **{fixed_expense_display_name(exp.name, lang)}**{status}  \n{exp.note}"
            )
            cols[1].markdown(f"{money(exp.amount)} {exp.currency}")
            try:
                if exp.is_active:
                    if cols[2].button(t("停用", lang), key=f"deact_{exp.id}"):
                        run_async(view.deactivate(exp.id))
                        st.success(t(prefix + "删除成功", lang))
                        st.rerun()
                else:
                    if cols[2].button(t("恢复", lang), key=f"restore_{exp.id}"):
                        run_async(view.restore(exp.id))
                        st.success(t(prefix + "恢复成功", lang))
                        st.rerun()
                if cols[3].button(t("永久删除", lang), key=f"hard_{exp.id}"):
                    run_async(view.delete(exp.id))
                    st.success(t(prefix + "永久删除成功", lang))
                    st.rerun()
            except StorageError as e:
                show_failure("操作失败：", e, lang)
            cols[4].caption(f"#{exp.sort_order}")
    else:
        st.info(t("暂无记录，请先新增", lang))

    st.markdown("---")
    editing = pick_record(
        view.items, lambda exp: fixed_expense_display_name(exp.name, lang), lang, "fixed_edit"
    )
    with st.form("fixed_form", clear_on_submit=editing is None):
        name = st.text_input(t("名称", lang), value=editing.name if editing else "")
        amount = st.text_input(t("金额", lang), value=str(editing.amount) if editing else "")
        currency = st.selectbox(t("币种", lang), CURRENCIES, index=_index_of(CURRENCIES, editing.currency if editing else None))
        icon = st.text_input(t("图标", lang), value=editing.icon if editing else "")
        sort_order = st.text_input(t("排序", lang), value=str(editing.sort_order) if editing else "")
        note = st.text_input(t("备注", lang), value=editing.note if editing else "")
        is_active = st.checkbox(t("启用", lang), value=editing.is_active if editing else True)
        submitted = st.form_submit_button(t("保存", lang), type="primary")

    if submitted:
        form = {
            "name": name,
            "amount": amount,
            "currency": currency,
            "icon": icon,
            "sort_order": sort_order,
            "note": note,
            "is_active": is_active,
        }
        try:
            run_async(view.save(form, editing_id=editing.id if editing else None))
            st.success(t(prefix + "保存成功", lang))
            st.rerun()
        except (FormValidationError, StorageError) as e:
            show_failure("保存失败：", e, lang)


# =============================================================================
# TRANSACTIONS
# =============================================================================

def _reset_subcategory():
    # Changing the category always clears the subcategory
    form = change_category(st.session_state.tx_form, st.session_state.tx_category)
    st.session_state.tx_form = form
    st.session_state.tx_subcategory = ""


def render_transactions_page(app: FinanceApp, lang: Lang):
    """Render the income/expense page."""
    st.title(t("收入 / 支出记录", lang))
    view = app.transactions()
    run_async(view.load_accounts())
    run_async(view.load())
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)

    if view.items:
        st.dataframe(
            [
                {
                    t("日期", lang): tx.date.isoformat() if tx.date else t("无日期", lang),
                    t("类型", lang): t(tx.type, lang),
                    t("分类", lang): t(tx.category, lang),
                    t("二级分类", lang): t(tx.subcategory, lang),
                    t("金额", lang): money(tx.amount),
                    t("账户", lang): view.account_name(tx.account_id) or t("未分配账户", lang),
                    t("币种", lang): tx.currency,
                    t("备注", lang): tx.note,
                }
                for tx in view.items
            ],
            use_container_width=True,
        )
        download_button(view.export(lang), lang, "export_transactions")
    else:
        st.info(t("暂无记录，请先新增", lang))

    editing = pick_record(
        view.items,
        lambda tx: f"{tx.date or ''} {t(tx.category, lang)} {money(tx.amount)}",
        lang,
        "tx_edit",
    )
    editing_key = editing.id if editing else None
    if st.session_state.get("tx_editing") != editing_key or "tx_form" not in st.session_state:
        st.session_state.tx_editing = editing_key
        st.session_state.tx_form = (
            form_from_transaction(editing) if editing
            else new_transaction_form(get_settings().app.default_currency)
        )
        st.session_state.tx_category = st.session_state.tx_form["category"]
        st.session_state.tx_subcategory = st.session_state.tx_form["subcategory"]

    form = st.session_state.tx_form
    st.subheader(t("编辑", lang) if editing else t("添加记录", lang))

    categories = [""] + view.categories()
    if form["category"] and form["category"] not in categories:
        categories.append(form["category"])
    st.selectbox(
        t("分类", lang),
        categories,
        key="tx_category",
        format_func=lambda c: t(c, lang) if c else t("选择分类", lang),
        on_change=_reset_subcategory,
    )
    subcategories = [""] + view.subcategories(st.session_state.tx_category)
    if st.session_state.tx_subcategory not in subcategories:
        subcategories.append(st.session_state.tx_subcategory)
    st.selectbox(
        t("二级分类", lang),
        subcategories,
        key="tx_subcategory",
        format_func=lambda c: t(c, lang) if c else t("选择二级分类", lang),
    )

    types = [kind.value for kind in TransactionType]
    account_ids = [""] + [acc.id for acc in view.accounts]
    with st.form("tx_form_widget"):
        tx_date = st.date_input(t("日期", lang), value=form["date"] or date.today())
        tx_type = st.selectbox(t("类型", lang), types, index=_index_of(types, form["type"]), format_func=lambda v: t(v, lang))
        amount = st.number_input(t("金额", lang), value=float(form["amount"] or 0), step=0.01, format="%.2f")
        account_id = st.selectbox(
            t("账户", lang),
            account_ids,
            index=_index_of(account_ids, form["account_id"]),
            format_func=lambda aid: view.account_name(aid) if aid else t("选择账户", lang),
        )
        currency = st.selectbox(t("币种", lang), CURRENCIES, index=_index_of(CURRENCIES, form["currency"]))
        note = st.text_input(t("备注", lang), value=form["note"])
        submitted = st.form_submit_button(t("保存", lang), type="primary")

    if submitted:
        payload = {
            "date": tx_date,
            "type": tx_type,
            "category": st.session_state.tx_category,
            "subcategory": st.session_state.tx_subcategory,
            "amount": Decimal(str(amount)),
            "account_id": account_id,
            "currency": currency,
            "note": note,
        }
        try:
            run_async(view.save(payload, editing_id=editing_key))
            st.session_state.pop("tx_form", None)
            st.success(t("保存成功", lang))
            st.rerun()
        except (FormValidationError, StorageError) as e:
            show_failure("操作失败：", e, lang)

    if editing:
        render_delete_button(view, editing.id, "确定要删除这条记录吗？", lang, "tx_delete")


# =============================================================================
# REPORTS
# =============================================================================

def render_summary_page(app: FinanceApp, lang: Lang):
    """Monthly category summary, totals in the reporting currency only."""
    view = app.summary()
    run_async(view.load())
    st.title(t("每月收支分类汇总（仅 {n}）", lang, n=view.currency))
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)
    if not view.months:
        st.info(t("暂无数据", lang))
        return

    for month in view.months:
        with st.expander(month.month, expanded=month.month == view.expanded_month):
            for kind in (TransactionType.INCOME, TransactionType.EXPENSE):
                section = month.types.get(kind)
                if section is None:
                    continue
                st.markdown(f"#### {t(kind.value, lang)}：${money(section.total)}")
                for category in section.categories.values():
                    share = ""
                    if category.percent is not None:
                        share = " " + t("（占 {n}%）", lang, n=f"{category.percent:.2f}")
                    st.markdown(f"**{t(category.category, lang)}**：${money(category.total)}{share}")
                    st.dataframe(
                        [
                            {
                                t("日期", lang): tx.date.isoformat() if tx.date else "",
                                t("二级分类", lang): t(tx.subcategory, lang),
                                t("金额", lang): money(tx.amount),
                                t("币种", lang): tx.currency,
                                t("备注", lang): tx.note,
                            }
                            for tx in category.transactions
                        ],
                        use_container_width=True,
                    )


def _detail_table(transactions, lang: Lang):
    st.dataframe(
        [
            {
                t("日期", lang): tx.date.isoformat() if tx.date else "",
                t("分类", lang): t(tx.category, lang),
                t("二级分类", lang): t(tx.subcategory, lang),
                t("备注", lang): tx.note,
                t("金额", lang): money(tx.amount),
            }
            for tx in transactions
        ],
        use_container_width=True,
    )


def render_account_overview_page(app: FinanceApp, lang: Lang):
    """Per-account monthly statements."""
    st.title(t("账户总览", lang))
    view = app.account_overview()
    run_async(view.load())
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)
    if not view.overview:
        st.info(t("暂无数据", lang))
        return

    download_button(view.export(lang), lang, "export_overview")

    for key, summary in view.overview.items():
        name = summary.account.name or key
        if key == "未分配账户":
            name = t(key, lang)
        with st.expander(
            f"{name} · {t('收入合计', lang)} {money(summary.total_income)} · "
            f"{t('支出合计', lang)} {money(summary.total_expense)} · "
            f"{t('净额', lang)} {money(summary.total_net)}"
        ):
            st.caption(
                f"{t('初始余额', lang)}: {money(summary.account.initial_balance)} · "
                f"{t('初始日期', lang)}: {summary.account.initial_date or ''}"
            )
            for month, bucket in summary.months.items():
                st.markdown(f"### {month}")
                st.markdown(f"{t('上月余额', lang)}：{money(bucket.prev_balance)}")
                st.markdown(f"**{t('收入汇总（正）', lang)}**：{money(bucket.income_total)}")
                if bucket.income:
                    _detail_table(bucket.income, lang)
                else:
                    st.caption(t("无收入明细", lang))
                st.markdown(f"**{t('支出汇总（负）', lang)}**：{money(bucket.expense_total)}")
                if bucket.expense:
                    _detail_table(bucket.expense, lang)
                else:
                    st.caption(t("无支出明细", lang))
                if bucket.transfer:
                    st.markdown(f"**{t('转账（仅展示，不计入汇总）', lang)}**")
                    _detail_table(bucket.transfer, lang)
                st.markdown(f"{t('当月净额 = 收入 + 支出', lang)}：{money(bucket.net)}")
                st.markdown(f"{t('下月余额 = 上月余额 + 净额', lang)}：{money(bucket.next_balance)}")


def render_balance_page(app: FinanceApp, lang: Lang):
    """Current balance of every account."""
    st.title(t("账户余额快照", lang))
    view = app.balance()
    run_async(view.load())
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)
    rows = view.balances()
    if not rows:
        st.info(t("暂无数据", lang))
        return
    st.dataframe(
        [
            {
                t("账户名称", lang): acc.name,
                t("币种", lang): acc.currency,
                t("初始余额", lang): money(acc.initial_balance),
                t("当前余额", lang): money(balance),
                t("备注", lang): acc.note,
            }
            for acc, balance in rows
        ],
        use_container_width=True,
    )
    download_button(view.export(lang), lang, "export_balance")


# =============================================================================
# PROJECTS AND WORK LOGS
# =============================================================================

def render_projects_page(app: FinanceApp, lang: Lang):
    """Render the projects page."""
    st.title(t("项目管理", lang))
    view = app.projects()
    run_async(view.load())
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)

    if view.items:
        st.dataframe(
            [
                {
                    t("名称", lang): p.name,
                    t("地点", lang): p.location,
                    t("预计开始", lang): p.expected_start_date or "",
                    t("预计结束", lang): p.expected_end_date or "",
                    t("实际开始", lang): p.actual_start_date or "",
                    t("实际结束", lang): p.actual_end_date or "",
                    t("备注", lang): p.note,
                }
                for p in view.items
            ],
            use_container_width=True,
        )
    else:
        st.info(t("暂无记录，请先新增", lang))

    editing = pick_record(view.items, lambda p: p.name, lang, "project_edit")
    with st.form("project_form", clear_on_submit=editing is None):
        st.subheader(t("编辑", lang) if editing else t("新建项目", lang))
        name = st.text_input(t("名称", lang), value=editing.name if editing else "")
        location = st.text_input(t("地点", lang), value=editing.location if editing else "")
        col1, col2 = st.columns(2)
        expected_start = col1.date_input(t("预计开始", lang), value=editing.expected_start_date if editing else None)
        expected_end = col2.date_input(t("预计结束", lang), value=editing.expected_end_date if editing else None)
        actual_start = col1.date_input(t("实际开始", lang), value=editing.actual_start_date if editing else None)
        actual_end = col2.date_input(t("实际结束", lang), value=editing.actual_end_date if editing else None)
        note = st.text_area(t("备注", lang), value=editing.note if editing else "")
        submitted = st.form_submit_button(t("保存", lang), type="primary")

    if submitted:
        form = {
            "name": name,
            "location": location,
            "expected_start_date": expected_start,
            "expected_end_date": expected_end,
            "actual_start_date": actual_start,
            "actual_end_date": actual_end,
            "note": note,
        }
        try:
            run_async(view.save(form, editing_id=editing.id if editing else None))
            st.success(t("保存成功", lang))
            st.rerun()
        except (FormValidationError, StorageError) as e:
            show_failure("保存失败：", e, lang)

    if editing:
        render_delete_button(view, editing.id, "确定要删除这个项目吗？", lang, "project_delete")


def render_worklog_page(app: FinanceApp, lang: Lang):
    """Work entries, hour statistics and export."""
    st.title(t("工程时间记录", lang))
    view = app.worklog()
    run_async(view.load_projects())
    run_async(view.load())
    if view.load_error:
        st.warning(t("加载失败：", lang) + view.load_error)

    # Statistics
    st.subheader(t("工时统计", lang))
    holiday_filter = st.radio(
        t("节假日", lang),
        list(HolidayFilter),
        format_func=lambda f: t({"all": "全部", "only": "仅节假日", "exclude": "排除节假日"}[f.value], lang),
        horizontal=True,
    )
    stats = view.stats(holiday_filter)
    col1, col2 = st.columns(2)
    col1.metric(t("本周工时", lang), f"{stats.this_week:.2f}")
    col2.metric(t("本月工时", lang), f"{stats.this_month:.2f}")
    col1.markdown(f"**{t('最近8周', lang)}**")
    col1.dataframe(
        [{t("周起始", lang): b.start.isoformat(), t("工时", lang): b.hours} for b in stats.weeks],
        use_container_width=True,
    )
    col2.markdown(f"**{t('最近12个月', lang)}**")
    col2.dataframe(
        [{t("月份", lang): b.start.strftime("%Y-%m"), t("工时", lang): b.hours} for b in stats.months],
        use_container_width=True,
    )

    st.markdown("---")
    st.subheader(t("已记录项目", lang))
    if view.items:
        st.dataframe(
            [
                {
                    t("日期", lang): log.date.isoformat() if log.date else t("无日期", lang),
                    t("项目", lang): view.project_name(log.project_id, lang),
                    t("出发时间", lang): log.start_time.strftime("%H:%M") if log.start_time else t("无时间", lang),
                    t("回家时间", lang): log.end_time.strftime("%H:%M") if log.end_time else t("无时间", lang),
                    t("总工时", lang): log.effective_hours,
                    t("地点", lang): log.location or t("无地点", lang),
                    t("备注", lang): log.note or t("无备注", lang),
                    t("节假日", lang): "✓" if log.is_holiday else "",
                }
                for log in view.items
            ],
            use_container_width=True,
        )
        download_button(view.export(lang), lang, "export_worklog")
    else:
        st.info(t("暂无记录，请先新增", lang))

    editing = pick_record(
        view.items,
        lambda log: f"{log.date or ''} {view.project_name(log.project_id, lang)}",
        lang,
        "worklog_edit",
    )
    project_ids = [""] + [p.id for p in view.projects]
    with st.form("worklog_form", clear_on_submit=editing is None):
        st.subheader(t("编辑", lang) if editing else t("新增记录", lang))
        log_date = st.date_input(t("日期", lang), value=editing.date if editing and editing.date else date.today())
        project_id = st.selectbox(
            t("项目", lang),
            project_ids,
            index=_index_of(project_ids, editing.project_id if editing else None),
            format_func=lambda pid: view.project_name(pid, lang) if pid else t("请选择项目", lang),
        )
        col1, col2 = st.columns(2)
        start_time = col1.time_input(t("出发时间", lang), value=editing.start_time if editing else None)
        end_time = col2.time_input(t("回家时间", lang), value=editing.end_time if editing else None)
        hours = st.text_input(
            t("总工时", lang),
            value=str(editing.hours) if editing and editing.hours else "",
            help=t("留空则按出发/回家时间计算", lang),
        )
        actual_hours = st.text_input(
            t("实际工时", lang),
            value="" if not editing or editing.actual_hours is None else str(editing.actual_hours),
        )
        location = st.text_input(t("地点", lang), value=editing.location if editing else "")
        note = st.text_area(t("备注（施工内容）", lang), value=editing.note if editing else "")
        is_holiday = st.checkbox(t("节假日", lang), value=editing.is_holiday if editing else False)
        submitted = st.form_submit_button(t("保存", lang), type="primary")

    if submitted:
        form = {
            "date": log_date,
            "project_id": project_id,
            "start_time": start_time,
            "end_time": end_time,
            "hours": hours,
            "actual_hours": actual_hours,
            "location": location,
            "note": note,
            "is_holiday": is_holiday,
        }
        try:
            run_async(view.save(form, editing_id=editing.id if editing else None))
            st.success(t("保存成功", lang))
            st.rerun()
        except (FormValidationError, StorageError) as e:
            show_failure("保存失败：", e, lang)

    if editing:
        render_delete_button(view, editing.id, "确定要删除这条记录吗？", lang, "worklog_delete")


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page(lang: Lang):
    """Render the settings page."""
    st.title("⚙️ " + t("设置", lang))

    st.markdown("### Connection Status")

    from family_finance.config import validate_all_settings

    status = validate_all_settings()

    services = [
        ("Supabase (Storage & Auth)", "supabase"),
        ("App", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your Supabase project URL "
        "and anon key. See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
