"""
Worklog Page

Work entries newest first with the project name resolved, the entry
form (hours filled in from the clock times), work-hour statistics and
the Excel export.
"""

from datetime import date
from typing import Any, Mapping, Optional

from family_finance.i18n import Lang, t
from family_finance.models.records import Project, WorkLog, coerce_time, hours_between
from family_finance.reports.worklog import HolidayFilter, WorkHourStats, compute_work_hour_stats
from family_finance.services.export import ExportFile, export_worklogs
from family_finance.validation import validate_worklog_form
from family_finance.views.base import CrudView, fetch_models


NO_PROJECT = "无项目"


def suggested_hours(start: Any, end: Any) -> float:
    """Hours the form pre-fills once both clock times are set."""
    return hours_between(coerce_time(start), coerce_time(end))


class WorkLogView(CrudView[WorkLog]):

    table = "worklogs"
    model = WorkLog
    order_by = (("date", True),)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.projects: list[Project] = []

    def validate(self, form: Mapping[str, Any]) -> WorkLog:
        return validate_worklog_form(form)

    async def load_projects(self) -> list[Project]:
        self.projects, _ = await fetch_models(
            self._storage, "projects", self.user_id, Project, self._audit_logger,
            order_by=(("created_at", True),),
        )
        return self.projects

    def project_names(self) -> dict[str, str]:
        return {p.id: p.name for p in self.projects if p.id}

    def project_name(self, project_id: Optional[str], lang: Lang = Lang.ZH) -> str:
        """Project name, or the localized "no project" label."""
        return self.project_names().get(project_id or "", t(NO_PROJECT, lang))

    def stats(
        self,
        holiday_filter: HolidayFilter = HolidayFilter.ALL,
        today: Optional[date] = None,
    ) -> WorkHourStats:
        """Recomputed from the loaded entries on every call."""
        return compute_work_hour_stats(self.items, today=today, holiday_filter=holiday_filter)

    def export(self, lang: Lang, today: Optional[date] = None) -> ExportFile:
        result = export_worklogs(self.items, self.project_names(), lang, today=today)
        self._audit_logger.log_export(self.user_id, result.filename, result.sheet_count)
        return result
