from typing import List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, field_validator
from stafftrack.models.enums import AppRole, parse_role


# ---------------------------------------------------------
# READ ROLE RECORD (what the loader hands to the engine)
# ---------------------------------------------------------
class RoleRecord(BaseModel):
    id: UUID
    user_id: UUID
    role: Optional[AppRole] = None
    department_access: List[str] = []
    department_edit_access: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("role", mode="before")
    @classmethod
    def unknown_role_is_absent(cls, value):
        return parse_role(value)

    @field_validator("department_access", "department_edit_access", mode="before")
    @classmethod
    def null_labels_are_empty(cls, value):
        return value or []

    class Config:
        from_attributes = True


# ---------------------------------------------------------
# UPSERT ROLE RECORD (admin edits)
# ---------------------------------------------------------
class RoleRecordUpsert(BaseModel):
    role: Optional[AppRole] = None
    department_access: List[str] = []
    department_edit_access: List[str] = []

    @field_validator("department_access", "department_edit_access")
    @classmethod
    def strip_labels(cls, value: List[str]) -> List[str]:
        labels = [label.strip() for label in value]
        if any(not label for label in labels):
            raise ValueError("Department labels cannot be empty")
        return labels
