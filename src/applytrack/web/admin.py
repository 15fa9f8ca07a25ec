"""Starlette-Admin setup: table views over applications and the profile."""

from __future__ import annotations

from starlette_admin.contrib.sqla import Admin, ModelView

from applytrack.web.models import Application, UserProfile


class ApplicationView(ModelView):
    page_size = 25
    fields = [
        "id", "company_name", "role", "location", "status", "applied_at",
        "job_url", "company_summary", "insights", "tech_stack",
        "gap_analysis", "cover_letter", "email_content",
        "cover_letter_context", "created_at",
    ]
    exclude_fields_from_list = [
        "id", "company_summary", "insights", "tech_stack", "gap_analysis",
        "cover_letter", "email_content", "cover_letter_context",
    ]
    # JSON list column; edited through the API only
    exclude_fields_from_edit = ["tech_stack"]
    searchable_fields = ["company_name", "role", "location", "status"]
    sortable_fields = ["company_name", "status", "applied_at", "created_at"]
    fields_default_sort = [("created_at", True)]

    def can_create(self, request) -> bool:
        # New rows need a uuid and JSON list columns; the API creates them.
        return False


class UserProfileView(ModelView):
    page_size = 10
    fields = [
        "full_name", "email", "phone", "address", "city", "school",
        "availability_start", "availability_duration_months",
        "bio_preferences", "cv_url", "cv_content",
    ]
    exclude_fields_from_list = ["bio_preferences", "cv_content", "address"]

    def can_create(self, request) -> bool:
        return False

    def can_delete(self, request) -> bool:
        return False


def create_admin(engine) -> Admin:
    """Create and configure the Starlette-Admin instance."""
    admin = Admin(engine, title="applytrack", base_url="/admin")

    admin.add_view(ApplicationView(Application, icon="fa fa-briefcase", label="Applications"))
    admin.add_view(UserProfileView(UserProfile, icon="fa fa-user", label="Profile"))

    return admin
