from blog_api.services.activity_logger import ActivityLogger
from blog_api.services.post_service import PostService
from blog_api.services.related import RelatedContentResolver

__all__ = ["ActivityLogger", "PostService", "RelatedContentResolver"]
