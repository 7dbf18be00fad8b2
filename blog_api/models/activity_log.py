"""Activity log database model using SQLModel."""

from datetime import datetime
from enum import StrEnum
from typing import cast

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, Integer, SQLModel, String

from blog_api.configs.settings import MAX_ACTION_LENGTH
from blog_api.models.post import utc_now


class ActivityAction(StrEnum):
    """Post lifecycle events recorded in the audit trail."""

    NEW_POST = "new_post"
    DELETE_POST = "delete_post"


class ActivityLogDB(SQLModel, table=True):
    """
    Audit row written alongside post creation and deletion.

    ``post_id`` is NULL for the terminal ``delete_post`` entry, which is
    written after the post row is gone.
    """

    __tablename__ = cast("declared_attr[str]", "activity_logs")

    id: int | None = Field(default=None, primary_key=True, description="Log ID")
    action: str = Field(
        sa_column=Column(String(MAX_ACTION_LENGTH), nullable=False),
        description="Action tag, e.g. new_post",
    )
    post_id: int | None = Field(
        default=None,
        sa_column=Column(
            "post_id",
            Integer,
            ForeignKey("posts.id"),
            nullable=True,
            index=True,
        ),
        description="Referenced post ID (foreign key to posts.id)",
    )
    logged_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Log timestamp",
    )
