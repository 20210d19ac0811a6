"""Projects page."""

from typing import Any, Mapping

from family_finance.models.records import Project
from family_finance.validation import validate_project_form
from family_finance.views.base import CrudView


class ProjectsView(CrudView[Project]):
    """Projects, most recently created first."""

    table = "projects"
    model = Project
    order_by = (("created_at", True),)

    def validate(self, form: Mapping[str, Any]) -> Project:
        return validate_project_form(form)
