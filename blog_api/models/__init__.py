"""Database models for the application."""

from blog_api.models.activity_log import ActivityAction, ActivityLogDB
from blog_api.models.post import PostDB

__all__ = ["ActivityAction", "ActivityLogDB", "PostDB"]
