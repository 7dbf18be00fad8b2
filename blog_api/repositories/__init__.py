from blog_api.repositories.activity_log import ActivityLogRepository
from blog_api.repositories.base import BaseRepository
from blog_api.repositories.post import PostRepository

__all__ = ["ActivityLogRepository", "BaseRepository", "PostRepository"]
