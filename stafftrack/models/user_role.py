# stafftrack/models/user_role.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, JSON, String
from sqlalchemy import Enum as PGEnum
from sqlalchemy.dialects.postgresql import ARRAY
from datetime import datetime, timezone
import uuid
from typing import List, Optional

from stafftrack.models.enums import AppRole


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# text[] on Postgres, JSON everywhere else (local sqlite)
LabelList = JSON().with_variant(ARRAY(String), "postgresql")


class UserRoleRecord(SQLModel, table=True):
    __tablename__ = "user_roles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # one record per authenticated actor
    user_id: uuid.UUID = Field(nullable=False, index=True, unique=True)

    # stored as the Postgres ENUM "app_role" using the lowercase values
    role: Optional[AppRole] = Field(
        default=None,
        sa_column=Column(
            PGEnum(
                AppRole,
                name="app_role",
                values_callable=lambda roles: [r.value for r in roles],
            ),
            nullable=True,
        ),
    )

    department_access: List[str] = Field(
        default_factory=list,
        sa_column=Column(LabelList, nullable=False)
    )
    department_edit_access: List[str] = Field(
        default_factory=list,
        sa_column=Column(LabelList, nullable=False)
    )

    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
