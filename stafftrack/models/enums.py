from enum import Enum
from typing import Optional


class AppRole(str, Enum):
    Admin = "admin"
    AccountManager = "account_manager"
    Recruiter = "recruiter"
    BusinessDev = "business_dev"
    Operations = "operations"
    Finance = "finance"
    Viewer = "viewer"

    @property
    def label(self) -> str:
        return " ".join(word.capitalize() for word in self.value.split("_"))


# Views and tables the dashboard ships with. Identifiers outside these enums
# are still accepted everywhere and simply resolve to "denied".
class View(str, Enum):
    Dashboard = "dashboard"
    Clients = "clients"
    Jobs = "jobs"
    Recruiters = "recruiters"
    AccountManagers = "account-managers"
    BusinessDev = "business-dev"
    Operations = "operations"
    Finance = "finance"
    Performance = "performance"
    Admin = "admin"


class Table(str, Enum):
    Clients = "clients"
    Jobs = "jobs"
    JobRecruiters = "job_recruiters"
    RecruiterActivities = "recruiter_activities"
    AmActivities = "am_activities"
    BdProspects = "bd_prospects"
    EmployeeScores = "employee_scores"
    Invoices = "invoices"
    Payments = "payments"
    UserRoles = "user_roles"


def parse_role(value) -> Optional[AppRole]:
    """Blank or unrecognised role values resolve to no role."""
    if value is None or isinstance(value, AppRole):
        return value
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return AppRole(value)
    except ValueError:
        return None


def format_role(role: Optional[AppRole]) -> str:
    role = parse_role(role)
    if role is None:
        return "No Role Assigned"
    return role.label
