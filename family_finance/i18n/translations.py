"""
Chinese → English UI strings.

Chinese is the source language: every label in the app is written in
Chinese and looked up here when the English interface is active.
Keys that have no entry are shown as-is.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Union


class Lang(str, Enum):
    """Supported interface languages."""
    ZH = "zh"
    EN = "en"


EN: dict[str, str] = {
    # ===== Navigation / General =====
    "账户管理": "Accounts",
    "收入/支出": "Transactions",
    "收入 / 支出": "Transactions",
    "收入 / 支出记录": "Transactions",
    "收支汇总": "Summary",
    "账户总揽": "Account Overview",
    "账户总览": "Account Overview",
    "工程记录": "Worklog",
    "工程时间记录": "Worklog",
    "已记录项目": "Recorded Work Items",
    "账户余额": "Balance",
    "账户余额快照": "Balance Snapshot",
    "项目管理": "Projects",
    "设置": "Settings",
    "语言": "Language",
    "欢迎使用家庭财务App": "Welcome to the Family Finance App",
    "新增": "Add",
    "新增记录": "Add Record",
    "新建项目": "New Project",
    "添加账户": "Add Account",
    "添加记录": "Add Record",
    "编辑": "Edit",
    "删除": "Delete",
    "保存": "Save",
    "取消": "Cancel",
    "操作": "Actions",
    "选择要编辑的记录": "Select a record to edit",
    "导航": "Navigation",

    # ===== Authentication =====
    "登录账户": "Sign In",
    "邮箱": "Email",
    "密码": "Password",
    "登录": "Sign In",
    "退出登录": "Sign Out",
    "登录失败，请检查邮箱和密码": "Sign-in failed. Please check your email and password.",
    "忘记密码？点我发送重置链接": "Forgot password? Send a reset link",
    "发送失败，请确认邮箱正确": "Sending failed. Please check the email address.",
    "已发送重设密码邮件，请检查邮箱": "Password reset email sent. Please check your inbox.",
    "请先登录": "Please sign in first",

    # ===== Export =====
    "导出为Excel": "Export to Excel",
    "导出为 Excel": "Export to Excel",
    "导出 Excel": "Export to Excel",
    "导出中…": "Exporting…",

    # ===== Loading / Empty states =====
    "加载中…": "Loading…",
    "加载失败：": "Load failed: ",
    "暂无数据。": "No data.",
    "暂无数据": "No data.",
    "暂无记录，请先新增": "No records yet. Please add one first.",

    # ===== Table headers / Form fields =====
    "账户名称": "Account Name",
    "日期": "Date",
    "类型": "Type",
    "分类": "Category",
    "二级分类": "Subcategory",
    "金额": "Amount",
    "余额": "Balance",
    "账户": "Account",
    "币种": "Currency",
    "备注": "Note",
    "备注（施工内容）": "Note (Work Details)",
    "所有人": "Owner",
    "卡号": "Card Number",
    "初始余额": "Initial Balance",
    "当前余额": "Current Balance",
    "起始日期": "Start Date",
    "初始日期": "Initial Date",
    "名称": "Name",
    "图标": "Icon",
    "排序": "Sort",
    "启用": "Active",
    "地点": "Location",
    "出发时间": "Start Time",
    "回家时间": "End Time",
    "总工时": "Total Hours",
    "实际工时": "Actual Hours",
    "节假日": "Holiday",
    "留空则按出发/回家时间计算": "Leave empty to compute from start/end time",
    "项目": "Project",
    "请选择项目": "Select Project",
    "选择分类": "Select Category",
    "选择二级分类": "Select Subcategory",
    "选择账户": "Select Account",

    # ===== Fallback display values =====
    "无日期": "No Date",
    "无时间": "No Time",
    "无项目": "No Project",
    "无地点": "No Location",
    "无备注": "No Note",
    "未知账户": "Unknown Account",
    "未分类": "Uncategorized",

    # ===== Transaction types =====
    "收入": "Income",
    "支出": "Expense",
    "转账": "Transfer",

    # ===== Account overview =====
    "未分配账户": "Unassigned Account",
    "上月余额": "Prev Balance",
    "下月余额": "Next Balance",
    "收入合计": "Total Income",
    "支出合计": "Total Expense",
    "净额": "Net",
    "净额（收+支）": "Net (Income + Expense)",
    "收入汇总（正）": "Income Total (Positive)",
    "支出汇总（负）": "Expense Total (Negative)",
    "收入汇总（为正）": "Income Total (Positive)",
    "支出汇总（为负）": "Expense Total (Negative)",
    "当月净额 = 收入 + 支出": "Monthly Net = Income + Expense",
    "下月余额 = 上月余额 + 净额": "Next Balance = Prev Balance + Net",
    "无收入明细": "No income items",
    "无支出明细": "No expense items",
    "转账（仅展示，不计入汇总）": "Transfers (shown only, not included in totals)",

    # ===== Messages / Dialogs =====
    "账户名称和所有人不能为空": "Account name and owner are required",
    "名称不能为空": "Name is required",
    "日期不能为空": "Date is required",
    "金额必须是有效的正数": "Amount must be a valid positive number",
    "未登录用户，无法添加账户": "Not signed in; cannot add account",
    "确定要删除这个账户吗？": "Are you sure you want to delete this account?",
    "确定要删除这条记录吗？": "Are you sure you want to delete this record?",
    "确定要删除这个项目吗？": "Are you sure you want to delete this project?",
    "确定要永久删除这条记录吗？此操作不可恢复。": "Permanently delete this record? This cannot be undone.",
    "确认删除": "Confirm delete",
    "操作失败：": "Operation failed: ",
    "删除失败：": "Delete failed: ",
    "保存失败：": "Save failed: ",
    "恢复失败：": "Restore failed: ",
    "保存成功": "Saved successfully",
    "删除成功": "Deleted successfully",
    "永久删除成功": "Permanently deleted",
    "恢复成功": "Restored successfully",
    "用户信息获取失败，请重新登录": "User info missing. Please sign in again.",

    # ===== Accounts page =====
    "家庭账户管理": "Account Management",
    "家庭账户总余额": "Total Family Balance",
    "（正）": "(Positive)",
    "（负）": "(Negative)",

    # ===== Fixed expenses =====
    "当前月份固定花销": "Monthly Fixed Expenses",
    "当前月固定花销": "Monthly Fixed Expenses",
    "固定花销管理": "Fixed Expenses Management",
    "固定花销-当前月": "Fixed Monthly Expenses",
    "一键导入模板": "Import Template",
    "永久删除": "Delete Permanently",
    "停用": "Deactivate",
    "恢复": "Restore",
    "已停用": "Inactive",
    "合计": "Total",
    "导入成功": "Import successful",
    "导入失败：": "Import failed: ",
    "表内已有数据，是否按模板覆盖/更新？": "Table already has data. Overwrite/update with template?",
    "（演示模式）演示用户无法导入模板": "(Demo mode) Demo users cannot import templates",
    "（演示模式）保存成功": "(Demo mode) Saved successfully",
    "（演示模式）删除成功": "(Demo mode) Deleted successfully",
    "（演示模式）永久删除成功": "(Demo mode) Permanently deleted",
    "（演示模式）恢复成功": "(Demo mode) Restored successfully",
    "⚠️ 缺少唯一索引 (user_id, name)。请在 Supabase 中为 fixed_expenses 创建唯一索引。":
        "⚠️ Missing unique index on (user_id, name). Create it on fixed_expenses in Supabase.",
    "⚠️ RLS 策略未配置。请在 Supabase 中为 fixed_expenses 配置行级安全策略。":
        "⚠️ RLS policies not configured. Configure row-level security for fixed_expenses in Supabase.",
    "房贷": "Mortgage",
    "汽车保险": "Car Insurance",
    "房屋保险": "Home Insurance",
    "车 lease": "Car Lease",
    "地税": "Property Tax",
    "水电": "Utilities",
    "燃气": "Gas",
    "煤气": "Gas",
    "宽带": "Internet",
    "电话费": "Phone Bill",

    # ===== Categories (stored in Chinese, translated for display) =====
    "食物": "Food",
    "买菜": "Groceries",
    "餐厅/外卖": "Restaurant/Takeout",
    "工作餐A": "Work Meal A",
    "工作餐B": "Work Meal B",
    "饮品/甜品": "Drinks/Dessert",
    "其他": "Other",
    "其他费用": "Other Fees",

    "车辆": "Vehicle",
    "车1贷款": "Car 1 Loan",
    "车1加油": "Car 1 Fuel",
    "车2加油": "Car 2 Fuel",
    "车1修车保养": "Car 1 Service",
    "车2修车保养": "Car 2 Service",

    "工程": "Project",
    "自家工程": "Home Project",
    "客户工程": "Client Project",

    "房屋": "Housing",
    "网费": "Internet",
    "水费": "Water",
    "电费": "Electricity",
    "燃气费": "Gas",
    "手机费": "Mobile",

    "家用": "Household",
    "厨房用品": "Kitchen",
    "家居用品": "Home Goods",
    "卫浴用品": "Bath",
    "家居装饰": "Decor",

    "教育": "Education",
    "课外课程": "Extracurricular",
    "学校费用": "School Fees",
    "书籍/软件": "Books/Software",
    "考试费用": "Exam Fees",
    "学习用品": "Supplies",
    "运动/活动": "Sports/Activities",
    "爸妈教育": "Parents’ Education",

    "服饰": "Apparel",
    "鞋包/饰品": "Shoes/Bags/Accessories",
    "衣服": "Clothes",
    "美发美甲": "Hair/Nails",
    "护肤美容": "Skincare/Beauty",

    "休闲": "Leisure",
    "会员": "Membership",
    "门票/项目费用": "Tickets/Fees",
    "住宿": "Lodging",
    "交通": "Transport",
    "餐饮": "Dining",

    "医疗": "Medical",
    "牙医": "Dentist",
    "药物": "Medication",
    "门诊": "Clinic",

    "转账-": "Transfer",
    "还信用卡": "Credit Card Payment",
    "内部转账": "Internal Transfer",

    "补贴": "Adjustment",
    "平帐补贴": "Balance Adjustment",

    # ===== Projects =====
    "预计开始": "Planned Start",
    "预计结束": "Planned End",
    "实际开始": "Actual Start",
    "实际结束": "Actual End",
    "所有项目": "All Projects",

    # ===== Account categories =====
    "活期账户": "Checking Account",
    "信用账户": "Credit Account",
    "现金账户": "Cash Account",
    "社保账户": "Social Account",

    # ===== Summary =====
    "每月收支分类汇总（仅 {n}）": "Monthly Category Summary ({n} only)",
    "（占 {n}%）": "(Share {n}%)",

    # ===== Work-hour statistics =====
    "工时统计": "Work Hours",
    "本周工时": "This Week",
    "本月工时": "This Month",
    "最近8周": "Last 8 Weeks",
    "最近12个月": "Last 12 Months",
    "周起始": "Week Of",
    "月份": "Month",
    "工时": "Hours",
    "全部": "All",
    "仅节假日": "Holidays Only",
    "排除节假日": "Exclude Holidays",
}


# Category → subcategory choices offered on the transaction form
CATEGORY_OPTIONS: dict[str, list[str]] = {
    "食物": ["买菜", "餐厅/外卖", "工作餐A", "工作餐B", "饮品/甜品", "其他"],
    "车辆": ["汽车保险", "车1贷款", "车1加油", "车2加油", "车1修车保养", "车2修车保养", "其他"],
    "工程": ["自家工程", "客户工程", "其他"],
    "房屋": ["房贷", "网费", "水费", "电费", "燃气费", "手机费", "房屋保险", "地税", "其他"],
    "家用": ["厨房用品", "家居用品", "卫浴用品", "家居装饰", "其他"],
    "教育": ["课外课程", "学校费用", "书籍/软件", "考试费用", "学习用品", "运动/活动", "爸妈教育", "其他费用"],
    "服饰": ["鞋包/饰品", "衣服", "美发美甲", "护肤美容", "其他"],
    "休闲": ["会员", "门票/项目费用", "住宿", "交通", "餐饮", "其他"],
    "医疗": ["牙医", "药物", "门诊", "其他"],
    "转账": ["还信用卡", "内部转账", "其他"],
    "补贴": ["平帐补贴", "其他"],
    "其他": ["其他"],
}

# Display-only names for the demo fixed expenses
FIXED_EXPENSE_NAME_EN: dict[str, str] = {
    "房租": "Rent",
    "水电燃气": "Utilities",
    "网络/手机": "Internet & Mobile",
    "车险": "Car Insurance",
    "健身房": "Gym Membership",
}


def as_lang(lang: Union[Lang, str]) -> Lang:
    """Unknown language codes fall back to Chinese."""
    try:
        return Lang(lang)
    except ValueError:
        return Lang.ZH


def t(key: str, lang: Union[Lang, str], n: Any = None) -> str:
    """
    Translate a Chinese UI string.

    Identity for Chinese; dictionary lookup falling back to the key for
    English. A single `{n}` placeholder is filled when `n` is given.
    """
    if as_lang(lang) is Lang.ZH:
        text = key
    else:
        text = EN.get(key, key)
    if n is not None:
        text = text.replace("{n}", str(n))
    return text


def subcategories_for(category: str) -> list[str]:
    return CATEGORY_OPTIONS.get(category, [])


def fixed_expense_display_name(name: str, lang: Union[Lang, str]) -> str:
    """Fixed expense names use their own map first, then the main table."""
    if as_lang(lang) is Lang.ZH:
        return name
    return FIXED_EXPENSE_NAME_EN.get(name) or EN.get(name, name)


def format_amount(value: Union[Decimal, float, int, None]) -> str:
    """Two decimals with thousands separators; None renders as 0.00."""
    try:
        number = Decimal(str(value)) if value is not None else Decimal("0")
    except ArithmeticError:
        number = Decimal("0")
    return f"{number:,.2f}"
