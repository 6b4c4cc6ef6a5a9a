# stafftrack/core/policy.py

from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, ValidationError

# ==========================================================
# DEFAULT POLICY
# Keys must match the labels stored in user_roles.department_access
# and user_roles.department_edit_access.
# ==========================================================
DEPARTMENT_VIEW_MAP: Dict[str, List[str]] = {
    "Recruiter": ["recruiters"],
    "Account Manager": ["clients", "jobs", "account-managers"],
    "Business Development": ["business-dev"],
    "Operations Manager": ["operations", "performance"],
    "Finance": ["finance"],
}

DEPARTMENT_EDIT_MAP: Dict[str, List[str]] = {
    "Recruiter": ["recruiter_activities"],
    "Account Manager": ["clients", "jobs", "job_recruiters", "am_activities"],
    "Business Development": ["bd_prospects"],
    "Operations Manager": ["employee_scores"],
    "Finance": ["invoices", "payments"],
}

_NOTHING: FrozenSet[str] = frozenset()


class PolicyError(Exception):
    """Raised when a policy document cannot be loaded at startup."""


class PolicyDocument(BaseModel):
    view_grants: Dict[str, List[str]] = {}
    edit_grants: Dict[str, List[str]] = {}


def _freeze(grants: Mapping[str, Iterable[str]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({dept: frozenset(ids) for dept, ids in grants.items()})


class PolicyTables:
    """
    Read-only department -> view / department -> table grants.

    Built once at startup and handed to every Authorizer. Unknown
    departments grant nothing.
    """

    __slots__ = ("_view_grants", "_edit_grants")

    def __init__(
        self,
        view_grants: Optional[Mapping[str, Iterable[str]]] = None,
        edit_grants: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        self._view_grants = _freeze(view_grants or {})
        self._edit_grants = _freeze(edit_grants or {})

    @property
    def view_grants(self) -> Mapping[str, FrozenSet[str]]:
        return self._view_grants

    @property
    def edit_grants(self) -> Mapping[str, FrozenSet[str]]:
        return self._edit_grants

    def views_for(self, department: str) -> FrozenSet[str]:
        return self._view_grants.get(department, _NOTHING)

    def tables_for(self, department: str) -> FrozenSet[str]:
        return self._edit_grants.get(department, _NOTHING)

    def __repr__(self) -> str:
        return (
            f"PolicyTables(departments={sorted(set(self._view_grants) | set(self._edit_grants))})"
        )


DEFAULT_POLICY = PolicyTables(DEPARTMENT_VIEW_MAP, DEPARTMENT_EDIT_MAP)


def load_policy(path: Optional[str] = None) -> PolicyTables:
    """
    Returns the policy tables for this process.
    - No path: built-in defaults.
    - Path: JSON document {"view_grants": {...}, "edit_grants": {...}}.
    """
    if not path:
        return DEFAULT_POLICY

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise PolicyError(f"Cannot read policy file '{path}': {e}") from e

    try:
        document = PolicyDocument.model_validate_json(raw)
    except ValidationError as e:
        raise PolicyError(f"Invalid policy file '{path}': {e}") from e

    logger.info(
        f"Loaded policy from {path}: {len(document.view_grants)} view grants, "
        f"{len(document.edit_grants)} edit grants"
    )
    return PolicyTables(document.view_grants, document.edit_grants)
